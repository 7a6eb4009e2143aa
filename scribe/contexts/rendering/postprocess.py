"""
Post-processing of raw model output into clean cover letter prose.

normalize() is pure and total: any input, including None or non-strings,
yields a string without raising.
"""

import re
from typing import Any

# Whole text wrapped in one fenced block, optional language tag
FENCED_BLOCK = re.compile(r"```(?:[\w+-]*[ \t]*\n)?(?P<body>.*?)\n?[ \t]*```", re.DOTALL)
EXCESS_NEWLINES = re.compile(r"\n{3,}")
# Characters .docx (XML 1.0) cannot hold; \t and \n are kept
XML_INCOMPATIBLE = re.compile(r"[^\t\n\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def strip_code_fence(text: str) -> str:
    """Remove one enclosing ``` fence if it wraps the entire text."""
    match = FENCED_BLOCK.fullmatch(text)
    if match is None or "```" in match.group("body"):
        return text
    return match.group("body").strip()


def normalize(raw: Any) -> str:
    """
    Normalize raw model output.

    - Non-string input yields ""
    - Control characters other than tab and newline are removed
    - One enclosing fenced block is unwrapped
    - Runs of three or more newlines collapse to a single blank line
    - Non-empty output ends with exactly one newline

    Examples:
        normalize("```\\nX\\n```")
        # "X\\n"
        normalize("a\\n\\n\\n\\nb")
        # "a\\n\\nb\\n"
    """
    if not isinstance(raw, str):
        return ""

    text = XML_INCOMPATIBLE.sub("", raw.replace("\r\n", "\n")).strip()
    text = strip_code_fence(text)
    text = EXCESS_NEWLINES.sub("\n\n", text)
    text = text.rstrip()
    return f"{text}\n" if text else ""
