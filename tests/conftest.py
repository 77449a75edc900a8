import pytest


def file_block(path: str, body_lines: list[str]) -> str:
    header = [
        f"diff --git a/{path} b/{path}",
        "index 1234567..89abcde 100644",
        f"--- a/{path}",
        f"+++ b/{path}",
    ]
    return "\n".join(header + body_lines)


@pytest.fixture
def two_file_diff():
    app = file_block("src/app.js", [
        "@@ -1,3 +1,4 @@",
        " const a = 1;",
        "-const b = 2;",
        "+const b = 3;",
        "+const c = 4;",
    ])
    lock = file_block("yarn.lock", [
        "@@ -10,2 +10,2 @@",
        "-left-pad@1.0.0:",
        "+left-pad@1.3.0:",
    ])
    return f"{app}\n{lock}\n"


@pytest.fixture
def make_block():
    return file_block
