"""
Merging discovered aliases into a document's existing aliases.
"""

from collections.abc import Iterable
from typing import Any


def normalize_aliases(existing: Any) -> list[str]:
    """Coerce a frontmatter ``aliases`` value to a list of strings.

    None -> [], a single string -> [it], a sequence -> its items.
    Non-string scalars (YAML may produce ints or dates) become their str().
    """
    if existing is None:
        return []
    if isinstance(existing, str):
        return [existing]
    if isinstance(existing, (list, tuple)):
        return [item if isinstance(item, str) else str(item)
                for item in existing if item is not None]
    return [str(existing)]


def merge_aliases(existing: Any, discovered: Iterable[str]) -> list[str]:
    """
    Append discovered aliases to the existing ones, dropping duplicates.

    Deduplication is exact string equality, first occurrence wins, so
    existing aliases keep their order at the front. No trimming or case
    folding is done: "Лесок" and "лесок" are distinct.

    Idempotent: merge_aliases(merge_aliases(e, d), d) == merge_aliases(e, d)
    """
    merged: list[str] = []
    seen: set[str] = set()
    for alias in [*normalize_aliases(existing), *discovered]:
        if alias in seen:
            continue
        seen.add(alias)
        merged.append(alias)
    return merged
