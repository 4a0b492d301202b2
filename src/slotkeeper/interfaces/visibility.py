"""Provider visibility port.

A single boolean per provider, independent of any per-day state, deciding
whether the provider is discoverable by customers at all.
"""

import abc


class ProviderVisibility(abc.ABC):
    """Read and write a provider's discoverability flag."""

    @abc.abstractmethod
    def get(self, provider_id: str) -> bool:
        """Return True if the provider is visible. Unknown providers are visible."""

    @abc.abstractmethod
    def set(self, provider_id: str, visible: bool) -> None:
        """Persist the provider's visibility flag."""
