from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from models import RECORD_TYPES, SearchResult

logger = logging.getLogger(__name__)

_FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
_FENCED_RE = re.compile(r"```\s*([\s\S]*?)```")


def parse_json_output(text: str) -> Optional[object]:
    """Pull a JSON value out of model output; ``None`` when nothing decodes."""
    if not text:
        return None
    candidate = _strip_fence(text)
    if candidate:
        parsed = _try_parse_json(candidate)
        if parsed is not None:
            return parsed

    parsed = _try_parse_json(text)
    if parsed is not None:
        return parsed

    for pattern in (_FENCED_JSON_RE, _FENCED_RE):
        fenced = pattern.search(text)
        if fenced:
            parsed = _try_parse_json(fenced.group(1).strip())
            if parsed is not None:
                return parsed

    brace_match = _extract_json_block(text, "{", "}")
    if brace_match:
        parsed = _try_parse_json(brace_match)
        if parsed is not None:
            return parsed

    bracket_match = _extract_json_block(text, "[", "]")
    if bracket_match:
        parsed = _try_parse_json(bracket_match)
        if parsed is not None:
            return parsed

    return None


def _strip_fence(text: str) -> Optional[str]:
    candidate = text.strip()
    if candidate.lower().startswith("```json"):
        candidate = candidate[len("```json") :]
    if candidate.startswith("```"):
        candidate = candidate[len("```") :]
    if candidate.endswith("```"):
        candidate = candidate[:-3]
    candidate = candidate.strip()
    if (candidate.startswith("{") and candidate.endswith("}")) or (
        candidate.startswith("[") and candidate.endswith("]")
    ):
        return candidate
    return None


def _try_parse_json(candidate: str) -> Optional[object]:
    try:
        return json.loads(candidate)
    except (ValueError, RecursionError):
        return None


def _extract_json_block(text: str, open_char: str, close_char: str) -> Optional[str]:
    start = text.find(open_char)
    end = text.rfind(close_char)
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1].strip()


def _coerce_score(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(score):
        return None
    return min(1.0, max(0.0, score))


def _coerce_result(item: Any) -> Optional[SearchResult]:
    if not isinstance(item, dict):
        return None
    record_type = str(item.get("type") or "").strip().lower()
    if record_type not in RECORD_TYPES:
        return None
    record_id = item.get("id")
    if record_id is None or str(record_id).strip() == "":
        return None
    score = _coerce_score(item.get("relevanceScore"))
    if score is None:
        return None
    return SearchResult(
        record_type=record_type,
        record_id=str(record_id),
        title=str(item.get("title") or ""),
        description=str(item.get("description") or ""),
        relevance_score=score,
    )


def decode_ranking_response(
    text: Any,
    allowed: Optional[Iterable[Tuple[str, str]]] = None,
) -> Optional[List[SearchResult]]:
    """Decode a ranking response into results.

    Returns ``None`` when the response is unusable (not a string, empty, not
    JSON, too deeply nested, not an object, or without a ``results`` list).
    Otherwise returns the well-formed items, restricted to ``allowed`` (type,
    id) pairs when given, ordered by descending score.
    """
    if not isinstance(text, str):
        return None
    parsed = parse_json_output(text)
    if not isinstance(parsed, dict):
        return None
    items = parsed.get("results")
    if not isinstance(items, list):
        return None

    allowed_keys: Optional[Set[Tuple[str, str]]] = set(allowed) if allowed is not None else None
    results: List[SearchResult] = []
    dropped = 0
    for item in items:
        result = _coerce_result(item)
        if result is None:
            dropped += 1
            continue
        if allowed_keys is not None and (result.record_type, result.record_id) not in allowed_keys:
            dropped += 1
            continue
        results.append(result)

    if dropped:
        logger.warning("Dropped %d malformed or unknown ranking results", dropped)

    # sorted() is stable, so equal scores keep the backend's order
    return sorted(results, key=lambda result: -result.relevance_score)


def response_summary(payload: Dict[str, Any]) -> Dict[str, int]:
    return {key: len(value) for key, value in payload.items() if isinstance(value, list)}
