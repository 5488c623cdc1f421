"""Token estimation heuristic.

Not a tokenizer: roughly four characters per token, good enough to tell a
caller whether a document fits a context window.
"""

from __future__ import annotations

import math


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / 4)


def format_tokens(count: int) -> str:
    if count < 1000:
        return f"~{count} tokens"
    return f"~{count / 1000:.1f}k tokens"
