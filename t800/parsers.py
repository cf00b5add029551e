"""Parsers turning oracle response text into decision records."""
from __future__ import annotations

import json
import math
import re
from typing import Any

from t800.client import DecodeError

# Pattern to match ```json ... ``` or ``` ... ``` code fences.
_CODE_FENCE_RE = re.compile(
    r"^\s*```(?:json)?\s*\n?(.*?)\n?\s*```\s*$",
    re.DOTALL,
)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping the text.

    Returns the inner content if fences are found, otherwise the text
    stripped of surrounding whitespace.
    """
    match = _CODE_FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_json_object(response: str) -> dict[str, Any]:
    """Parse a response as a JSON object.

    Raises:
        DecodeError: If the text is not JSON or not a top-level object.
    """
    cleaned = strip_code_fences(response)
    try:
        parsed: Any = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"failed to parse decision: {exc} (response: {cleaned!r})") from exc
    if not isinstance(parsed, dict):
        raise DecodeError(f"Expected JSON object, got {type(parsed).__name__}")
    return parsed


def _number(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise DecodeError(f"field {key!r} is not a number: {value!r}") from exc
    if not math.isfinite(number):
        raise DecodeError(f"field {key!r} is not finite: {value!r}")
    return number


def _confidence(data: dict[str, Any]) -> float:
    return min(1.0, max(0.0, _number(data, "confidence", 0.0)))


def parse_combat_decision(response: str) -> dict[str, Any]:
    """Validate and normalize a combat decision payload.

    ``action`` is required and lower-cased; ``confidence`` is clamped to
    [0, 1]; the remaining fields default to empty values.
    """
    data = parse_json_object(response)
    action = data.get("action")
    if not isinstance(action, str) or not action.strip():
        raise DecodeError(f"decision has no action: {data!r}")
    return {
        "action": action.strip().lower(),
        "target": str(data.get("target") or ""),
        "weapon": str(data.get("weapon") or "").strip().lower(),
        "priority": int(_number(data, "priority", 0)),
        "confidence": _confidence(data),
        "explanation": str(data.get("explanation") or ""),
    }


def parse_engagement_decision(response: str) -> dict[str, Any]:
    """Validate an engagement verdict; ``should_engage`` must be a boolean."""
    data = parse_json_object(response)
    verdict = data.get("should_engage")
    if not isinstance(verdict, bool):
        raise DecodeError(f"should_engage is not a boolean: {verdict!r}")
    return {
        "should_engage": verdict,
        "confidence": _confidence(data),
        "explanation": str(data.get("explanation") or ""),
    }
