"""
Base provider protocols.

These define the interfaces the orchestrator consumes: the host that owns
the documents, and the completion provider that talks to the model.
Using Protocol for structural subtyping - no explicit inheritance required.
"""

from typing import Any, Protocol, runtime_checkable

from ..types import DocumentHandle, Prompt


# -----------------------------------------------------------------------------
# Host capabilities
# -----------------------------------------------------------------------------

@runtime_checkable
class HostCapabilities(Protocol):
    """
    What the hosting application provides to an alias run.

    The host owns document storage and the user notification channel.
    aliasgen only reads title and body and rewrites the ``aliases``
    frontmatter field.

    Example implementation (see aliasgen.host.FileHost):
        class FileHost:
            def get_active_document(self):
                return DocumentHandle(id=str(self.path), title=self.path.stem)

            def read_body(self, handle):
                return Path(handle.id).read_text()
            ...
    """

    def get_active_document(self) -> DocumentHandle | None:
        """Return the document the user is working on, or None."""
        ...

    def read_body(self, handle: DocumentHandle) -> str:
        """Return the full document text, frontmatter included."""
        ...

    def read_frontmatter_aliases(self, handle: DocumentHandle) -> Any:
        """
        Return the current ``aliases`` value.

        Returns:
            None, a single string, or a list of strings
        """
        ...

    def write_frontmatter_aliases(self, handle: DocumentHandle, aliases: list[str]) -> bool:
        """
        Replace the ``aliases`` field, leaving everything else untouched.

        Returns:
            True on success, False if the host refused the write
        """
        ...

    def notify_user(self, message: str) -> None:
        """Show a short status message to the user."""
        ...


# -----------------------------------------------------------------------------
# Completion
# -----------------------------------------------------------------------------

@runtime_checkable
class CompletionProvider(Protocol):
    """
    Sends a prompt to a chat-completion model and returns its reply.

    Exactly one request is made per call; there is no retry.

    Example implementation:
        class EchoCompletion:
            def complete(self, prompt, *, temperature=None):
                return '["' + prompt.user + '"]'
    """

    def complete(self, prompt: Prompt, *, temperature: float | None = None) -> str:
        """
        Request a completion.

        Args:
            prompt: System and user instructions
            temperature: Sampling temperature; None uses the provider's
                default for the prompt's mode

        Returns:
            Reply text with surrounding whitespace stripped

        Raises:
            NetworkError: Endpoint unreachable
            ApiRejectionError: Non-success response
            MalformedResponseError: Success response without reply text
        """
        ...


# -----------------------------------------------------------------------------
# Provider Registry
# -----------------------------------------------------------------------------

class ProviderRegistry:
    """
    Registry for discovering and instantiating completion providers.

    Providers are registered by name and can be instantiated from
    configuration.

    Example:
        registry = ProviderRegistry()
        registry.register_completion("openai", OpenAICompletion)

        provider = registry.create_completion("openai", {"api_key": "sk-..."})
    """

    def __init__(self):
        self._completion_providers: dict[str, type] = {}
        self._lazy_loaded = False

    def _ensure_providers_loaded(self) -> None:
        """Lazily load provider modules."""
        if self._lazy_loaded:
            return
        self._lazy_loaded = True
        # Importing registers the classes; nothing is instantiated
        from . import llm  # noqa: F401

    def register_completion(self, name: str, provider_class: type) -> None:
        """Register a completion provider class."""
        self._completion_providers[name] = provider_class

    def create_completion(self, name: str, params: dict | None = None) -> CompletionProvider:
        """Create a completion provider instance."""
        self._ensure_providers_loaded()
        if name not in self._completion_providers:
            available = ", ".join(self._completion_providers.keys()) or "none"
            raise ValueError(
                f"Unknown completion provider: '{name}'. "
                f"Available providers: {available}."
            )
        return self._completion_providers[name](**(params or {}))

    def list_completion_providers(self) -> list[str]:
        """List registered completion provider names."""
        self._ensure_providers_loaded()
        return list(self._completion_providers.keys())


# Global registry instance
# Concrete providers register themselves on import
_registry = ProviderRegistry()


def get_registry() -> ProviderRegistry:
    """Get the global provider registry."""
    return _registry
