"""Turn a raw code payload into the body that gets executed."""

import textwrap


def normalize_code(code: str, keep_indentation: bool = False) -> str:
    """
    Normalize submitted code into an executable body.

    The payload is trimmed, split into lines and blank lines are dropped.
    By default every line is trimmed too, so code pasted from a test file
    runs regardless of its surrounding indentation. Line order is kept.

    With keep_indentation=True only trailing whitespace and the common
    leading indentation are removed, which keeps indented blocks
    (for/if/async with) intact.

    Args:
        code: Raw code as submitted
        keep_indentation: Keep relative indentation of lines

    Returns:
        Newline-joined body, empty string if nothing but whitespace was sent
    """
    if keep_indentation:
        lines = [line.rstrip() for line in code.split("\n")]
        lines = [line for line in lines if line.strip()]
        return textwrap.dedent("\n".join(lines))

    lines = [line.strip() for line in code.strip().split("\n")]
    return "\n".join(line for line in lines if line)
