"""
Provider interfaces and implementations.
"""

from .base import CompletionProvider, HostCapabilities, ProviderRegistry, get_registry

__all__ = ["CompletionProvider", "HostCapabilities", "ProviderRegistry", "get_registry"]
