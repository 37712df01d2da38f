"""Token counting and truncation for prompt inputs.

Uses ``tiktoken`` so that user-supplied code is cut on token boundaries
rather than characters.
"""

from __future__ import annotations

import tiktoken

_ENCODING_NAME = "cl100k_base"
_TRUNCATION_MARKER = "\n[… truncated to fit token budget]"

_encoder: tiktoken.Encoding | None = None


def _get_encoder() -> tiktoken.Encoding:
    global _encoder  # noqa: PLW0603
    if _encoder is None:
        _encoder = tiktoken.get_encoding(_ENCODING_NAME)
    return _encoder


def count_tokens(text: str) -> int:
    """Return the token count for *text* under cl100k_base."""
    return len(_get_encoder().encode(text))


def truncate_to_budget(text: str, max_tokens: int) -> str:
    """Truncate *text* to fit within *max_tokens*, cutting at line boundaries.

    Text that already fits is returned unchanged.
    """
    tokens = _get_encoder().encode(text)
    if len(tokens) <= max_tokens:
        return text

    truncated = _get_encoder().decode(tokens[:max_tokens])

    # Roll back to the last newline when that keeps most of the text
    last_nl = truncated.rfind("\n")
    if last_nl > len(truncated) // 2:
        truncated = truncated[: last_nl + 1]

    return truncated + _TRUNCATION_MARKER
