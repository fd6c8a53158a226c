"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from ticketdesk.intake import IntakeWizard
from ticketdesk.resolution import ClientResolver

# Global ClientResolver instance (initialized on app startup)
_resolver: ClientResolver | None = None


def init_resolver(resolver: ClientResolver) -> ClientResolver:
    """Initialize the global ClientResolver instance."""
    global _resolver  # noqa: PLW0603
    _resolver = resolver
    return _resolver


def close_resolver() -> None:
    """Tear down the global ClientResolver and the resources it holds."""
    global _resolver  # noqa: PLW0603
    if _resolver is not None:
        _resolver.close()
        _resolver.integration.close()
        _resolver.session_store.close()
        _resolver = None


def get_resolver() -> Generator[ClientResolver, None, None]:
    """Dependency that provides the ClientResolver instance."""
    if _resolver is None:
        raise RuntimeError("ClientResolver not initialized. Call init_resolver() first.")
    yield _resolver


# Type alias for dependency injection
ResolverDep = Annotated[ClientResolver, Depends(get_resolver)]

# Global IntakeWizard instance (initialized on app startup)
_wizard: IntakeWizard | None = None


def init_wizard(wizard: IntakeWizard) -> IntakeWizard:
    """Initialize the global IntakeWizard instance."""
    global _wizard  # noqa: PLW0603
    _wizard = wizard
    return _wizard


def close_wizard() -> None:
    """Close the global IntakeWizard instance."""
    global _wizard  # noqa: PLW0603
    _wizard = None


def get_wizard() -> Generator[IntakeWizard, None, None]:
    """Dependency that provides the IntakeWizard instance."""
    if _wizard is None:
        raise RuntimeError("IntakeWizard not initialized. Call init_wizard() first.")
    yield _wizard


# Type alias for dependency injection
WizardDep = Annotated[IntakeWizard, Depends(get_wizard)]
