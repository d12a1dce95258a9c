"""Fixtures for API route unit tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from teachreg.api.app import register_exception_handlers
from teachreg.api.dependencies import get_registration_store
from teachreg.api.routes import notifications, registrations, students
from teachreg.registry import RegistrationStore


@pytest.fixture
def app(store: RegistrationStore):
    """Create a test FastAPI app bound to the in-memory store."""
    app = FastAPI()

    # Override store dependency
    def override_get_registration_store():
        yield store

    app.dependency_overrides[get_registration_store] = override_get_registration_store

    register_exception_handlers(app)

    # Include routes
    app.include_router(registrations.router, prefix="/api")
    app.include_router(students.router, prefix="/api")
    app.include_router(notifications.router, prefix="/api")

    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
