"""
Contract tests for the per-request transaction.

Requests go through the real service dependencies, repositories and
``get_db``; only the asyncpg pool is replaced by a recording double.

Tests cover:
- Commit completes before the response starts
- Domain and store errors roll the request back without committing
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from api.src.main import create_app


# ============================================================================
# RECORDING DRIVER OBJECTS (Test Doubles)
# ============================================================================


class RecordingConnection:
    """Answers the member statements and logs transaction outcomes."""

    def __init__(self, events: List[str]):
        self.events = events
        self.depth = 0
        self.fail_inserts = False
        self.members: Dict[Any, Dict[str, Any]] = {}

    @asynccontextmanager
    async def transaction(self):
        self.depth += 1
        try:
            yield
        except BaseException:
            self.events.append(f"rollback:{self.depth}")
            raise
        else:
            self.events.append(f"commit:{self.depth}")
        finally:
            self.depth -= 1

    async def fetchrow(self, sql: str, *args: Any):
        statement = " ".join(sql.split())
        if statement.startswith("INSERT INTO members"):
            if self.fail_inserts:
                raise ConnectionError("server closed the connection unexpectedly")
            now = datetime.now(timezone.utc)
            row = {"id": args[0], "name": args[1], "created_at": now, "updated_at": now}
            self.members[args[0]] = row
            return row
        if statement.startswith("SELECT") and "FROM members" in statement:
            return self.members.get(args[0])
        raise AssertionError(f"unexpected statement: {statement}")

    async def execute(self, sql: str, *args: Any) -> str:
        if sql.startswith("DELETE FROM members"):
            return f"DELETE {int(self.members.pop(args[0], None) is not None)}"
        raise AssertionError(f"unexpected statement: {sql}")


class RecordingPool:
    def __init__(self, conn: RecordingConnection):
        self.conn = conn

    @asynccontextmanager
    async def acquire(self):
        yield self.conn


# ============================================================================
# PYTEST FIXTURES
# ============================================================================


@pytest.fixture
def events() -> List[str]:
    return []


@pytest.fixture
def connection(events) -> RecordingConnection:
    return RecordingConnection(events)


@pytest.fixture
def db_client(settings, connection, events) -> TestClient:
    """Client whose app logs ``response_start:<status>`` next to commits."""
    application = create_app(settings)
    application.state.db_pool = RecordingPool(connection)

    async def recording_app(scope, receive, send):
        async def recording_send(message):
            if message["type"] == "http.response.start":
                events.append(f"response_start:{message['status']}")
            await send(message)

        await application(scope, receive, recording_send)

    return TestClient(recording_app, raise_server_exceptions=False)


# ============================================================================
# TRANSACTION TESTS
# ============================================================================


class TestRequestTransaction:
    """The request transaction settles before the client sees a status."""

    def test_create_commits_before_response(self, db_client, events):
        response = db_client.post("/members", json={"name": "Alice"})

        assert response.status_code == 201
        assert events.count("commit:1") == 1
        assert events.index("commit:1") < events.index("response_start:201")

    def test_delete_commits_before_response(self, db_client, connection, events):
        created = db_client.post("/members", json={"name": "Alice"}).json()
        events.clear()

        response = db_client.delete(f"/members/{created['id']}")

        assert response.status_code == 204
        assert connection.members == {}
        assert events.index("commit:1") < events.index("response_start:204")

    def test_created_member_is_readable_right_after_201(self, db_client):
        created = db_client.post("/members", json={"name": "Alice"}).json()

        assert db_client.get(f"/members/{created['id']}").status_code == 200

    def test_not_found_rolls_back(self, db_client, events):
        response = db_client.get(f"/members/{uuid4()}")

        assert response.status_code == 404
        assert "commit:1" not in events
        assert events.index("rollback:1") < events.index("response_start:404")

    def test_invalid_data_rolls_back(self, db_client, connection, events):
        response = db_client.post("/members", json={"name": ""})

        assert response.status_code == 422
        assert "commit:1" not in events
        assert "rollback:1" in events
        assert connection.members == {}

    def test_store_failure_rolls_back(self, db_client, connection, events):
        connection.fail_inserts = True

        response = db_client.post("/members", json={"name": "Alice"})

        assert response.status_code == 500
        assert "commit:1" not in events
        assert events.index("rollback:1") < events.index("response_start:500")
