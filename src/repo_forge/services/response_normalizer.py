"""Response normalizer — turn loosely-formatted LLM output into a JSON object.

Parsing is strict-then-degrade: the repaired text is parsed with the
standard JSON parser, and if that fails the caller gets a fixed fallback
shape carrying the raw text.  Bad model output is never an error.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_CRLF_RE = re.compile(r"\r\n|\r")
_NEWLINE_RUN_RE = re.compile(r"\n+")
# A valid escape pair, or a lone backslash that starts no valid escape.
_BACKSLASH_RE = re.compile(r'\\(["\\/bfnrt]|u[0-9a-fA-F]{4})|\\')

_TYPOGRAPHIC_QUOTES = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "‘": "'",
        "’": "'",
    }
)


@dataclass(frozen=True)
class FallbackShape:
    """The degraded object returned when the model output cannot be parsed.

    ``raw_field`` names the key that receives the raw text verbatim.
    """

    defaults: Mapping[str, Any] = field(default_factory=dict)
    raw_field: str = "raw"

    def build(self, raw: str) -> dict[str, Any]:
        result = copy.deepcopy(dict(self.defaults))
        result[self.raw_field] = raw
        return result


def strip_code_fences(text: str) -> str:
    """Remove every ```` ``` ```` / ```` ```json ```` marker and trim whitespace."""
    return _FENCE_RE.sub("", text).strip()


def _escape_backslash(match: re.Match[str]) -> str:
    if match.group(1) is not None:
        return match.group(0)
    return "\\\\"


def repair_json_text(text: str) -> str:
    """Apply the heuristic fixes that most often make model JSON parseable."""
    text = _CRLF_RE.sub("\n", text)
    text = _NEWLINE_RUN_RE.sub("\n", text)
    text = _BACKSLASH_RE.sub(_escape_backslash, text)
    return text.translate(_TYPOGRAPHIC_QUOTES)


def normalize_response(
    raw: str,
    fallback: FallbackShape,
    extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Parse *raw* into a dict, degrading to *fallback* when that is impossible.

    *extra* is merged on top of whichever object is produced.
    """
    cleaned = repair_json_text(strip_code_fences(raw))
    result: dict[str, Any]
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("AI response is not valid JSON (%s); using fallback", exc)
        result = fallback.build(raw)
    else:
        if isinstance(parsed, dict):
            result = parsed
        else:
            logger.warning(
                "AI response parsed to %s, not an object; using fallback",
                type(parsed).__name__,
            )
            result = fallback.build(raw)

    if extra:
        result.update(extra)
    return result
