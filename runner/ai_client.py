"""AI provider clients for PR description generation."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from config import Config

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a senior engineer writing pull request descriptions. "
    "Summarize what the changes do and why, in concise Markdown. "
    "Do not invent changes that are not in the diff."
)


@dataclass
class GenerationRequest:
    """One call to the model: a piece of diff plus the PR it belongs to."""

    diff_text: str
    context_hint: str = ""
    provider_options: dict = field(default_factory=dict)
    title: str = ""
    description: str = ""
    author: str = ""
    source_branch: str = ""
    destination_branch: str = ""
    repository: str = ""


@dataclass
class GenerationResponse:
    success: bool
    description: str = ""
    error: str | None = None


def build_user_message(request: GenerationRequest) -> str:
    """Render PR metadata and diff into the user prompt."""
    sections = [
        f"Title: {request.title or '(none)'}",
        f"Author: {request.author or '(unknown)'}",
        f"Repository: {request.repository or '(unknown)'}",
        f"Branches: {request.source_branch or '?'} -> {request.destination_branch or '?'}",
    ]
    if request.description:
        sections.append(f"Current description:\n{request.description}")
    if request.context_hint:
        sections.append(f"Additional context: {request.context_hint}")
    sections.append(f"Diff:\n```diff\n{request.diff_text}\n```")
    return "Write a pull request description for these changes.\n\n" + "\n\n".join(sections)


class AIClient(ABC):
    """Base class for AI clients."""

    name = "base"

    def __init__(self, config: Config):
        self.config = config

    def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Generate a description; provider errors come back as a failed response."""
        try:
            text = self._complete(SYSTEM_PROMPT, build_user_message(request), request.provider_options)
        except Exception as e:
            logger.error("Error calling %s API: %s", self.name, e)
            return GenerationResponse(success=False, error=str(e))

        text = (text or "").strip()
        if not text:
            return GenerationResponse(success=False, error=f"Empty response from {self.name}")
        return GenerationResponse(success=True, description=text)

    def __call__(self, request: GenerationRequest) -> GenerationResponse:
        return self.generate(request)

    @abstractmethod
    def _complete(self, system_prompt: str, user_message: str, options: dict) -> str:
        """Send one prompt and return the raw text response."""
        pass


class OpenAIClient(AIClient):
    """OpenAI API client using the Responses API."""

    name = "openai"

    def __init__(self, config: Config, api_key: str):
        from openai import OpenAI
        super().__init__(config)
        self.client = OpenAI(api_key=api_key)

    def _complete(self, system_prompt: str, user_message: str, options: dict) -> str:
        response = self.client.responses.create(
            model=options.get("model", self.config.model),
            instructions=system_prompt,
            input=user_message,
            max_output_tokens=options.get("max_tokens", self.config.max_tokens),
            temperature=options.get("temperature", self.config.temperature),
        )
        return response.output_text


class AnthropicClient(AIClient):
    """Anthropic Claude API client."""

    name = "anthropic"

    def __init__(self, config: Config, api_key: str):
        import anthropic
        super().__init__(config)
        self.client = anthropic.Anthropic(api_key=api_key)

    def _complete(self, system_prompt: str, user_message: str, options: dict) -> str:
        response = self.client.messages.create(
            model=options.get("model", self.config.model),
            max_tokens=options.get("max_tokens", self.config.max_tokens),
            temperature=options.get("temperature", self.config.temperature),
            system=system_prompt,
            messages=[{"role": "user", "content": user_message}],
        )
        return "".join(block.text for block in response.content if getattr(block, "type", "text") == "text")


class OllamaClient(AIClient):
    """Ollama local model client."""

    name = "ollama"

    def __init__(self, config: Config):
        super().__init__(config)
        self.base_url = config.ollama_url.rstrip("/")

    def _complete(self, system_prompt: str, user_message: str, options: dict) -> str:
        import requests
        response = requests.post(
            f"{self.base_url}/api/generate",
            json={
                "model": options.get("model", self.config.model),
                "system": system_prompt,
                "prompt": user_message,
                "stream": False,
                "options": {"temperature": options.get("temperature", self.config.temperature)},
            },
            timeout=300,
        )
        response.raise_for_status()
        return response.json().get("response", "")


def create_client(config: Config, api_key: str = None) -> AIClient:
    """Factory function to create the appropriate AI client."""
    if config.provider == "openai":
        if not api_key:
            raise ValueError("OPENAI_API_KEY required for OpenAI provider")
        return OpenAIClient(config, api_key)
    elif config.provider in ("anthropic", "claude"):
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY required for Anthropic provider")
        return AnthropicClient(config, api_key)
    elif config.provider == "ollama":
        return OllamaClient(config)
    else:
        raise ValueError(f"Unknown provider: {config.provider}")
