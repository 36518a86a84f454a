"""
aliasgen - note aliases from a language model.

Asks a chat-completion model for alternate names of a note (declension
forms of its title, or aliases suggested by its body) and merges them into
the note's YAML frontmatter without losing existing aliases.
"""

from .api import AliasExtractor
from .config import AliasConfig, load_config, save_config
from .merging import merge_aliases, normalize_aliases
from .parsing import parse_aliases
from .prompts import build_prompt
from .types import DocumentHandle, Prompt, RunResult, RunState

__version__ = "0.1.0"
__all__ = [
    "AliasExtractor",
    "AliasConfig",
    "DocumentHandle",
    "Prompt",
    "RunResult",
    "RunState",
    "build_prompt",
    "load_config",
    "merge_aliases",
    "normalize_aliases",
    "parse_aliases",
    "save_config",
]
