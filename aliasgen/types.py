"""
Data types for alias extraction.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional


# Prompt modes
TITLE_MODE = "title"
BODY_MODE = "body"


@dataclass(frozen=True)
class DocumentHandle:
    """
    A document as seen by the host.

    Attributes:
        id: Stable identifier (for files: the resolved path)
        title: Document title (for files: name without extension)
    """
    id: str
    title: str


@dataclass(frozen=True)
class Prompt:
    """
    Instruction pair sent to the completion endpoint.

    Attributes:
        system: System message (assistant persona)
        user: User message embedding the title and optional excerpt
        mode: TITLE_MODE or BODY_MODE
        excerpt: The body excerpt embedded in ``user`` ("" in title mode)
    """
    system: str
    user: str
    mode: str = TITLE_MODE
    excerpt: str = ""

    def messages(self) -> list[dict[str, str]]:
        """Chat-completion ``messages`` payload."""
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


class RunState(enum.Enum):
    """States of a single alias run."""
    IDLE = "idle"
    CHECKING_PRECONDITIONS = "checking_preconditions"
    PROMPTING = "prompting"
    AWAITING_COMPLETION = "awaiting_completion"
    PARSING = "parsing"
    MERGING = "merging"
    WRITING = "writing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class RunResult:
    """Outcome of ``AliasExtractor.add_aliases``."""
    state: RunState
    document: Optional[DocumentHandle] = None
    discovered: list[str] = field(default_factory=list)
    aliases: list[str] = field(default_factory=list)
    reason: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.state is RunState.DONE
