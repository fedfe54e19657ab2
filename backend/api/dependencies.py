"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires the debates module to its
collaborators: the configured repository, the sampler and the panel.
Services are created lazily on first access, so routes that only need the
panel never build a sampler.
"""

from typing import TYPE_CHECKING

from shared.config import get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.debates.interfaces import IDebateRepository, IDebateService, ISampler
    from modules.debates.panel import PanelRegistry


class ServiceContainer:
    """
    Container for all service instances.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._panel: "PanelRegistry | None" = None
        self._debate_repository: "IDebateRepository | None" = None
        self._sampler: "ISampler | None" = None
        self._debate_service: "IDebateService | None" = None

    @property
    def panel(self) -> "PanelRegistry":
        """Get the panel registry."""
        if self._panel is None:
            from modules.debates.panel import PanelRegistry
            self._panel = PanelRegistry.default()
        return self._panel

    @property
    def debate_repository(self) -> "IDebateRepository":
        """Get the debate repository for the configured storage backend."""
        if self._debate_repository is None:
            from modules.debates.service import build_repository
            self._debate_repository = build_repository(get_settings())
        return self._debate_repository

    @property
    def sampler(self) -> "ISampler":
        """Get the configured sampler."""
        if self._sampler is None:
            from providers.factory import build_sampler
            self._sampler = build_sampler(get_settings())
        return self._sampler

    @property
    def debates(self) -> "IDebateService":
        """Get the debate service instance."""
        if self._debate_service is None:
            from modules.debates.service import build_debate_service
            self._debate_service = build_debate_service(
                get_settings(),
                repository=self.debate_repository,
                sampler=self.sampler,
                panel=self.panel,
            )
        return self._debate_service

    def reset(self) -> None:
        """Reset all cached services."""
        self._panel = None
        self._debate_repository = None
        self._sampler = None
        self._debate_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container with new
    service instances. Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_debate_service() -> "IDebateService":
    """FastAPI dependency for debate service."""
    return get_container().debates


def get_panel() -> "PanelRegistry":
    """FastAPI dependency for the panel registry."""
    return get_container().panel
