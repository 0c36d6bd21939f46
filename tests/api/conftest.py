"""HTTP-level fixtures: the real application wired to in-memory stores"""
import pytest
from fastapi.testclient import TestClient

from app.dependencies.auth import get_authenticator
from app.dependencies.services import (
    get_author_service,
    get_listing_service,
    get_repair_service,
    get_review_service,
)
from main import app


@pytest.fixture
def client(authenticator, review_service, listing_service, author_service, repair_service):
    """Test client; the lifespan is not entered so no database is contacted"""
    app.dependency_overrides[get_authenticator] = lambda: authenticator
    app.dependency_overrides[get_review_service] = lambda: review_service
    app.dependency_overrides[get_listing_service] = lambda: listing_service
    app.dependency_overrides[get_author_service] = lambda: author_service
    app.dependency_overrides[get_repair_service] = lambda: repair_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(authenticator):
    def _headers(author_id, handle="knitter"):
        return {"Authorization": f"Bearer {authenticator.issue(author_id, handle)}"}
    return _headers
