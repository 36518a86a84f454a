"""
YAML frontmatter helpers.

A frontmatter block is a region at the very start of a document opened by
a line containing only ``---`` and closed by the next such line.
"""

import re
from typing import Any

import yaml

# Opening fence, lazily matched content, closing fence at end of line or text.
# Both fences are exactly "---" on their own line.
_FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)^---(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split text into (raw frontmatter, body).

    Raw frontmatter is None when the text has no leading block; the body
    is everything after the closing fence, untouched.
    """
    m = _FRONTMATTER_RE.match(text)
    if not m:
        return None, text
    return m.group(1), text[m.end():]


def strip_frontmatter(text: str) -> str:
    """Return text without its leading frontmatter block."""
    return split_frontmatter(text)[1]


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """
    Parse leading YAML frontmatter.

    Returns:
        (metadata, body) tuple. Metadata is empty if there is no block
        or the block is empty.

    Raises:
        ValueError: If the block is not a YAML mapping
    """
    raw, body = split_frontmatter(text)
    if raw is None:
        return {}, body
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML frontmatter: {e}") from e
    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise ValueError("Frontmatter is not a mapping")
    return data, body


def render_frontmatter(metadata: dict[str, Any], body: str) -> str:
    """Render metadata as a frontmatter block followed by body."""
    dumped = yaml.safe_dump(
        metadata,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"---\n{dumped}---\n{body}"
