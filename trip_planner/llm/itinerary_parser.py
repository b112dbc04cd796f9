"""
Pull a JSON object out of free-form model text.

Models are asked for bare JSON but regularly wrap it in markdown fences, add
commentary around it, leave trailing commas, or write "230 * 6" where a number
belongs. ``extract_itinerary`` undoes those near-misses and nothing more:
the rewrites only touch value positions outside of strings, so text inside a
string value is never altered.
"""
import json
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from trip_planner.errors import ExtractionError

_FENCE_OPEN_RE = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE_RE = re.compile(r"```\s*")

_NUMBER = r"([0-9]+(?:\.[0-9]+)?)"
# value must be followed by a separator: newline, comma or a closing bracket
_SEPARATOR_AHEAD = r"(?=\s*[\n,}\]])"
_PRODUCT_RE = re.compile(_NUMBER + r"\s*\*\s*" + _NUMBER + _SEPARATOR_AHEAD)
_ANNOTATED_NUMBER_RE = re.compile(_NUMBER + r"\s*\([^)]*\)" + _SEPARATOR_AHEAD)

_JSON_WHITESPACE = " \t\n\r"


# ------------------------------------------------------------
# Step 1 + 2: isolate the object
# ------------------------------------------------------------
def strip_code_fences(text: str) -> str:
    cleaned = _FENCE_OPEN_RE.sub("", text.strip())
    return _FENCE_RE.sub("", cleaned).strip()


def slice_json_object(text: str) -> str:
    """Keep the span from the first ``{`` to the last ``}``."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ExtractionError("No JSON object found in AI response")
    return text[start:end + 1]


# ------------------------------------------------------------
# Step 3: normalize near-miss syntax
# ------------------------------------------------------------
def _is_control(ch: str) -> bool:
    return ord(ch) < 0x20 or ord(ch) == 0x7F


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _JSON_WHITESPACE:
        pos += 1
    return pos


def _skip_blank(text: str, pos: int) -> int:
    # whitespace plus control characters, which are dropped anyway
    while pos < len(text) and (text[pos] in _JSON_WHITESPACE or _is_control(text[pos])):
        pos += 1
    return pos


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _rewrite_number(text: str, pos: int) -> Optional[Tuple[str, int]]:
    """
    Look for a disguised number starting exactly at ``pos``.
    Returns the replacement text and the position after the match.
    """
    m = _PRODUCT_RE.match(text, pos)
    if m:
        product = float(m.group(1)) * float(m.group(2))
        return str(_round_half_up(product) if math.isfinite(product) else 0), m.end()

    m = _ANNOTATED_NUMBER_RE.match(text, pos)
    if m:
        return m.group(1), m.end()

    return None


def normalize_json_text(text: str) -> str:
    out: List[str] = []
    in_string = False
    i, n = 0, len(text)

    while i < n:
        ch = text[i]

        if in_string:
            if ch == "\\" and i + 1 < n:
                out.append(text[i:i + 2])
                i += 2
                continue
            if ch == '"':
                in_string = False
            elif _is_control(ch):
                i += 1
                continue
            out.append(ch)
            i += 1
            continue

        if ch == '"':
            in_string = True
        elif _is_control(ch) and ch not in _JSON_WHITESPACE:
            i += 1
            continue
        elif ch == ",":
            nxt = _skip_blank(text, i + 1)
            if nxt < n and text[nxt] in "}]":
                i += 1
                continue
        elif ch == ":":
            value_start = _skip_whitespace(text, i + 1)
            out.append(text[i:value_start])
            rewritten = _rewrite_number(text, value_start)
            if rewritten:
                out.append(rewritten[0])
                i = rewritten[1]
            else:
                i = value_start
            continue

        out.append(ch)
        i += 1

    return "".join(out)


# ------------------------------------------------------------
# Step 4: parse
# ------------------------------------------------------------
def extract_itinerary(raw: str) -> Dict[str, Any]:
    if not isinstance(raw, str) or not raw.strip():
        raise ExtractionError("No content found in AI response")

    candidate = slice_json_object(strip_code_fences(raw))
    normalized = normalize_json_text(candidate)
    try:
        parsed = json.loads(normalized)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"AI response is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ExtractionError("AI response is not a JSON object")
    return parsed
