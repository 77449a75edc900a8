#!/usr/bin/env python3
"""AI PR Description - Entry point."""

import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path

from aggregator import AggregatedResult, ResultAggregator
from ai_client import GenerationRequest, create_client
from chunk_driver import ChunkedGenerationDriver
from config import load_config, Config
from prompt_optimizer import PromptData, PromptOptimizer


def read_prompt_data(diff_content: str, environ=None) -> PromptData:
    """PR metadata comes from the environment, the diff from a file or stdin."""
    env = os.environ if environ is None else environ
    return PromptData(
        title=env.get("PR_TITLE", ""),
        description=env.get("PR_DESCRIPTION", ""),
        diff=diff_content,
        author=env.get("PR_AUTHOR", ""),
        source_branch=env.get("SOURCE_BRANCH", ""),
        destination_branch=env.get("DESTINATION_BRANCH", ""),
        repository=env.get("REPO_NAME", ""),
        additional_context=env.get("ADDITIONAL_CONTEXT", ""),
    )


def base_request(data: PromptData) -> GenerationRequest:
    return GenerationRequest(
        diff_text=data.diff,
        context_hint=data.additional_context,
        title=data.title,
        description=data.description,
        author=data.author,
        source_branch=data.source_branch,
        destination_branch=data.destination_branch,
        repository=data.repository,
    )


def describe(data: PromptData, generate, config: Config) -> tuple[PromptData, AggregatedResult, dict | None]:
    """Run the whole pipeline for one PR: optimize, generate, aggregate."""
    optimizer = PromptOptimizer(config.filter_config(), config.chunk_config(), config.max_diff_length)
    optimized = optimizer.optimize(data)
    request = base_request(optimized)

    if optimized.all_files_ignored:
        return optimized, AggregatedResult(success=True), None

    if not optimized.requires_chunking:
        response = generate(request)
        result = AggregatedResult(
            success=response.success,
            description=response.description if response.success else "",
            chunks_processed=1,
            failed_chunks=0 if response.success else 1,
            error=None if response.success else response.error,
        )
        return optimized, result, None

    def report(chunk_result):
        status = "ok" if chunk_result.success else f"failed ({chunk_result.error})"
        print(f"Chunk {chunk_result.chunk_index + 1}/{len(optimized.chunks)}: {status}")

    driver = ChunkedGenerationDriver(generate, sink=report)
    results = driver.run(optimized.chunks, request)

    aggregator = ResultAggregator()
    result = aggregator.aggregate(optimized.chunks, results)
    summary = asdict(aggregator.summarize(optimized.chunks, results))
    return optimized, result, summary


def main() -> int:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config()

    # Get environment variables (names are fixed)
    if config.provider in ("anthropic", "claude"):
        api_key = os.environ.get("ANTHROPIC_API_KEY")
    else:
        api_key = os.environ.get("OPENAI_API_KEY")
    diff_path = os.environ.get("DIFF_PATH", "/dev/stdin")

    if not api_key and config.provider != "ollama":
        print("Error: OPENAI_API_KEY or ANTHROPIC_API_KEY required")
        return 1

    # Read diff
    if diff_path in ("/dev/stdin", "-"):
        diff_content = sys.stdin.read()
    else:
        diff_content = Path(diff_path).read_text()

    if not diff_content.strip():
        print("No changes to describe")
        return 0

    data = read_prompt_data(diff_content)
    ai = create_client(config, api_key)

    optimized, result, summary = describe(data, ai.generate, config)

    if optimized.all_files_ignored:
        print("No files to describe after filtering")
        return 0

    print(json.dumps({
        "success": result.success,
        "description": result.description,
        "chunks_processed": result.chunks_processed,
        "failed_chunks": result.failed_chunks,
        "filtered_files": optimized.filtered_files,
        "summary": summary,
        "error": result.error,
    }, indent=2, ensure_ascii=False))

    if not result.success:
        print(f"Description generation failed: {result.error}")
        return 1

    if result.failed_chunks:
        print(f"Warning: {result.failed_chunks} chunk(s) could not be processed")

    print("Description completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
