"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from teachreg.registry import RegistrationStore

# Global RegistrationStore instance (initialized on app startup)
_store: RegistrationStore | None = None


def init_registration_store(database_url: str = "teachreg.db") -> RegistrationStore:
    """Initialize the global RegistrationStore instance."""
    global _store  # noqa: PLW0603
    if _store is not None:
        _store.close()
    _store = RegistrationStore(database_url)
    return _store


def close_registration_store() -> None:
    """Close the global RegistrationStore instance."""
    global _store  # noqa: PLW0603
    if _store is not None:
        _store.close()
        _store = None


def get_registration_store() -> Generator[RegistrationStore, None, None]:
    """Dependency that provides the RegistrationStore instance."""
    if _store is None:
        raise RuntimeError(
            "RegistrationStore not initialized. Call init_registration_store() first."
        )
    yield _store


# Type alias for dependency injection
RegistrationStoreDep = Annotated[RegistrationStore, Depends(get_registration_store)]
