from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from spotfeed.database import get_db
from spotfeed.main import app


def _override_db(session: AsyncMock) -> None:
    async def _get_db():  # type: ignore[no-untyped-def]
        yield session

    app.dependency_overrides[get_db] = _get_db


def test_health_check_connected(client: TestClient) -> None:
    """Test the health check endpoint when the database answers."""
    session = AsyncMock()
    result = MagicMock()
    result.scalar.return_value = 1
    session.execute.return_value = result
    _override_db(session)

    try:
        response = client.get("/health")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert "version" in data


def test_health_check_disconnected(client: TestClient) -> None:
    """Test the health check reports degraded when the database is down."""
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
    _override_db(session)

    try:
        response = client.get("/health")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["database"] == "disconnected"
