"""
Shared pytest fixtures for aliasgen tests.

Provides an in-memory host and a scripted completion provider so no test
touches the network or a real notes vault.
"""

from pathlib import Path
from typing import Any

import pytest

from aliasgen.config import AliasConfig
from aliasgen.errors import CompletionError
from aliasgen.types import DocumentHandle, Prompt


class FakeHost:
    """In-memory HostCapabilities with a single document."""

    def __init__(
        self,
        title: str | None = "Note",
        body: str = "",
        aliases: Any = None,
        write_result: bool = True,
    ):
        self.handle = DocumentHandle(id=f"mem://{title}", title=title) if title else None
        self.body = body
        self.aliases = aliases
        self.write_result = write_result
        self.writes: list[list[str]] = []
        self.notifications: list[str] = []

    def get_active_document(self):
        return self.handle

    def read_body(self, handle):
        return self.body

    def read_frontmatter_aliases(self, handle):
        return self.aliases

    def write_frontmatter_aliases(self, handle, aliases):
        self.writes.append(list(aliases))
        if self.write_result:
            self.aliases = list(aliases)
        return self.write_result

    def notify_user(self, message):
        self.notifications.append(message)


class FakeCompletion:
    """Completion provider returning a canned reply or raising an error."""

    def __init__(self, reply: str = "", error: CompletionError | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[Prompt, float | None]] = []
        self.closed = False

    def complete(self, prompt: Prompt, *, temperature: float | None = None) -> str:
        self.calls.append((prompt, temperature))
        if self.error is not None:
            raise self.error
        return self.reply.strip()

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the user's config dir and API keys."""
    monkeypatch.setenv("ALIASGEN_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("ALIASGEN_OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def config(tmp_path) -> AliasConfig:
    """Configuration with a credential set."""
    return AliasConfig(path=tmp_path / "config", api_key="sk-test")


@pytest.fixture
def note_path(tmp_path) -> Path:
    """Directory for markdown notes."""
    notes = tmp_path / "notes"
    notes.mkdir()
    return notes
