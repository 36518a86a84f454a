"""
Prompt construction for alias extraction.

Two modes share one system prompt: title-only (declension forms of the
title) and title+body (alternate names suggested by a body excerpt). Both
allow the model to answer with a JSON array or a single comma-separated
string, since a prompt alone cannot guarantee strict JSON.
"""

from .frontmatter import strip_frontmatter
from .types import BODY_MODE, TITLE_MODE, Prompt

DEFAULT_MAX_BODY_CHARS = 2000

ALIAS_SYSTEM_PROMPT = (
    "Вы опытный лингвист, который помогает создавать формы склонения слов "
    "и альтернативные названия. Возвращайте только запрошенные данные в нужном "
    "формате без дополнительного текста."
)

_FORMAT_INSTRUCTIONS = (
    "верни их в формате JSON массива строк или в виде одной строки, где формы "
    "разделены запятыми. Не добавляй никакой дополнительной информации. "
    'Пример: ["форма1", "форма2", "форма3"] или "форма1, форма2, форма3".'
)


def build_title_prompt(title: str) -> str:
    """User message asking for every declension form of the title."""
    return (
        f'Составь все возможные формы склонения для названия "{title}" '
        f"и {_FORMAT_INSTRUCTIONS}"
    )


def build_body_prompt(title: str, excerpt: str) -> str:
    """User message asking for aliases of the title, informed by the excerpt."""
    return (
        f'Составь альтернативные названия (синонимы, сокращения, формы склонения) '
        f'для заметки с названием "{title}". Ниже приведён фрагмент её текста.\n\n'
        f"Текст:\n{excerpt}\n\n"
        f"Верни только альтернативные названия: {_FORMAT_INSTRUCTIONS}"
    )


def make_excerpt(body: str, max_len: int = DEFAULT_MAX_BODY_CHARS) -> str:
    """Body without frontmatter, cut to at most max_len characters.

    Plain prefix truncation; the cut may fall mid-word.
    """
    return strip_frontmatter(body)[:max(max_len, 0)]


def build_prompt(
    title: str,
    body: str | None = None,
    max_len: int = DEFAULT_MAX_BODY_CHARS,
) -> Prompt:
    """
    Build the prompt for one alias request.

    Args:
        title: Document title
        body: Document text; None selects title-only mode
        max_len: Maximum excerpt length in characters (after frontmatter
            is stripped)

    Returns:
        A Prompt; never raises, even for an empty body
    """
    if body is None:
        return Prompt(
            system=ALIAS_SYSTEM_PROMPT,
            user=build_title_prompt(title),
            mode=TITLE_MODE,
        )

    excerpt = make_excerpt(body, max_len)
    return Prompt(
        system=ALIAS_SYSTEM_PROMPT,
        user=build_body_prompt(title, excerpt),
        mode=BODY_MODE,
        excerpt=excerpt,
    )
