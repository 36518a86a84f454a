"""
Alias extraction API.

AliasExtractor runs one document through the pipeline:

    read document -> build prompt -> completion -> parse -> merge -> write

Every failure ends the run in RunState.ABORTED with a notification to the
user; nothing is retried and nothing propagates to the host.
"""

import logging
import threading
from typing import Optional

from .config import AliasConfig, load_config
from .errors import (
    AliasError,
    ApiRejectionError,
    CompletionError,
    EmptyResultError,
    MalformedResponseError,
    NetworkError,
    PreconditionError,
    WriteError,
)
from .merging import merge_aliases
from .parsing import parse_aliases, usable_aliases
from .prompts import build_prompt
from .providers.base import CompletionProvider, HostCapabilities, get_registry
from .types import DocumentHandle, RunResult, RunState

logger = logging.getLogger(__name__)

# User-facing messages
MSG_NO_DOCUMENT = "No active document"
MSG_MISSING_KEY = "Please enter your OpenAI API key in the aliasgen settings"
MSG_IN_PROGRESS = "Aliases are already being generated for this document"
MSG_UNREADABLE = "Could not read the document"
MSG_NETWORK = "Could not reach the OpenAI API. Check your connection and try again"
MSG_REJECTED = "OpenAI API error: {message}"
MSG_MALFORMED = "Unexpected response from the OpenAI API"
MSG_EMPTY = "Could not obtain aliases"
MSG_WRITE_FAILED = "Could not update aliases"
MSG_SUCCESS = "Aliases updated"


def user_message(error: AliasError) -> str:
    """Notification text for a failed run."""
    if isinstance(error, NetworkError):
        return MSG_NETWORK
    if isinstance(error, ApiRejectionError):
        return MSG_REJECTED.format(message=error.message)
    if isinstance(error, MalformedResponseError):
        return MSG_MALFORMED
    if isinstance(error, EmptyResultError):
        return MSG_EMPTY
    return str(error)


class AliasExtractor:
    """
    Orchestrates alias extraction for the host's active document.

    The host, configuration and (optionally) the completion provider are
    injected. Without a provider, one is created from the configuration
    after the credential check, so a missing key never reaches the network.

    A document with a run still pending is refused rather than raced.
    """

    def __init__(
        self,
        host: HostCapabilities,
        config: Optional[AliasConfig] = None,
        *,
        provider: Optional[CompletionProvider] = None,
        provider_name: str = "openai",
    ):
        self._host = host
        self._config = config if config is not None else load_config()
        self._provider = provider
        self._owns_provider = False
        self._provider_name = provider_name
        self._in_flight: set[str] = set()
        self._lock = threading.Lock()

    @property
    def config(self) -> AliasConfig:
        return self._config

    def _transition(self, handle: Optional[DocumentHandle], state: RunState) -> None:
        # Per-run state is in RunResult; runs on different documents overlap
        logger.debug("%s: %s", handle.id if handle else "-", state.value)

    def _get_provider(self) -> CompletionProvider:
        if self._provider is None:
            cfg = self._config
            try:
                self._provider = get_registry().create_completion(self._provider_name, {
                    "api_key": cfg.credential,
                    "model": cfg.model,
                    "base_url": cfg.base_url,
                    "max_tokens": cfg.max_tokens,
                    "timeout": cfg.timeout,
                    "title_temperature": cfg.title_temperature,
                    "body_temperature": cfg.body_temperature,
                })
            except ValueError as e:
                raise PreconditionError(f"Cannot create completion provider: {e}") from e
            self._owns_provider = True
        return self._provider

    def close(self) -> None:
        """Close the completion provider if this extractor created it."""
        if self._owns_provider and self._provider is not None:
            if hasattr(self._provider, "close"):
                self._provider.close()
            self._provider = None
            self._owns_provider = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _claim(self, handle: DocumentHandle) -> None:
        with self._lock:
            if handle.id in self._in_flight:
                raise PreconditionError(MSG_IN_PROGRESS)
            self._in_flight.add(handle.id)

    def _release(self, handle: DocumentHandle) -> None:
        with self._lock:
            self._in_flight.discard(handle.id)

    def add_aliases(
        self,
        *,
        use_body: bool = False,
        temperature: Optional[float] = None,
    ) -> RunResult:
        """
        Generate aliases for the active document and merge them into its
        frontmatter.

        Args:
            use_body: Include a body excerpt in the prompt (title+body mode)
            temperature: Override the provider's per-mode temperature

        Returns:
            RunResult with state DONE or ABORTED
        """
        self._transition(None, RunState.CHECKING_PRECONDITIONS)
        handle = self._host.get_active_document()
        if handle is None:
            return self._abort(PreconditionError(MSG_NO_DOCUMENT), None)
        if not self._config.credential:
            return self._abort(PreconditionError(MSG_MISSING_KEY), handle)
        try:
            self._claim(handle)
        except PreconditionError as e:
            return self._abort(e, handle)

        try:
            return self._run(handle, use_body, temperature)
        except AliasError as e:
            return self._abort(e, handle)
        finally:
            self._release(handle)

    def _run(
        self,
        handle: DocumentHandle,
        use_body: bool,
        temperature: Optional[float],
    ) -> RunResult:
        self._transition(handle, RunState.PROMPTING)
        body = None
        if use_body:
            try:
                body = self._host.read_body(handle)
            except OSError as e:
                raise PreconditionError(f"{MSG_UNREADABLE}: {e}") from e
        prompt = build_prompt(handle.title, body, self._config.max_body_chars)

        self._transition(handle, RunState.AWAITING_COMPLETION)
        raw = self._get_provider().complete(prompt, temperature=temperature)

        self._transition(handle, RunState.PARSING)
        discovered = usable_aliases(parse_aliases(raw))
        logger.debug("Discovered aliases for %r: %s", handle.title, discovered)
        if not discovered:
            raise EmptyResultError(MSG_EMPTY)

        self._transition(handle, RunState.MERGING)
        try:
            existing = self._host.read_frontmatter_aliases(handle)
        except OSError as e:
            raise PreconditionError(f"{MSG_UNREADABLE}: {e}") from e
        aliases = merge_aliases(existing, discovered)

        self._transition(handle, RunState.WRITING)
        try:
            written = self._host.write_frontmatter_aliases(handle, aliases)
        except OSError as e:
            raise WriteError(f"{MSG_WRITE_FAILED}: {e}") from e
        if not written:
            raise WriteError(MSG_WRITE_FAILED)

        self._transition(handle, RunState.DONE)
        logger.info("Updated aliases for %s (%d total, %d discovered)",
                    handle.id, len(aliases), len(discovered))
        self._host.notify_user(MSG_SUCCESS)
        return RunResult(
            state=RunState.DONE,
            document=handle,
            discovered=discovered,
            aliases=aliases,
        )

    def _abort(self, error: AliasError, handle: Optional[DocumentHandle]) -> RunResult:
        message = user_message(error)
        if isinstance(error, MalformedResponseError):
            logger.error("Malformed completion response: %s", error, exc_info=error)
        elif isinstance(error, CompletionError):
            logger.warning("Completion failed (%s): %s", error.kind, error)
        else:
            logger.warning("Alias run aborted: %s", error)

        self._transition(handle, RunState.ABORTED)
        self._host.notify_user(message)
        return RunResult(
            state=RunState.ABORTED,
            document=handle,
            reason=message,
            error=error,
        )
