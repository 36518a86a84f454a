"""
Tolerant parsing of model replies into alias candidates.

Replies are tried against an ordered list of strategies; the first one
that applies wins. A strategy returns None when it does not apply.
"""

import json
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


def parse_json_array(raw: str) -> list[str] | None:
    """Strict parse: a JSON array whose elements are all strings.

    Returns the elements as-is (order kept, no dedup), or None for
    malformed JSON or any other shape.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, list):
        return None
    if not all(isinstance(item, str) for item in data):
        return None
    return data


def split_comma_list(raw: str) -> list[str]:
    """Permissive parse: split on commas and trim each segment.

    Empty segments are kept. Always succeeds; text without a comma gives
    a one-element list.
    """
    return [segment.strip() for segment in raw.split(",")]


PARSE_STRATEGIES: tuple[Callable[[str], list[str] | None], ...] = (
    parse_json_array,
    split_comma_list,
)


def parse_aliases(raw: str) -> list[str]:
    """
    Turn a model reply into an ordered list of alias candidates.

    Args:
        raw: Reply text, already stripped of surrounding whitespace

    Returns:
        Candidates in reply order. May contain empty strings and
        duplicates; see usable_aliases().
    """
    for strategy in PARSE_STRATEGIES:
        result = strategy(raw)
        if result is not None:
            logger.debug("Parsed %d candidates with %s", len(result), strategy.__name__)
            return result
    return [raw]


def usable_aliases(candidates: list[str]) -> list[str]:
    """Drop empty candidates, keeping order."""
    return [c for c in candidates if c]
