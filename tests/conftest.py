"""Pytest fixtures for the connection simulator, event stores and API."""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.database.events import InMemoryEventStore
from src.database.events_file import FileEventStore
from src.integrations.clients.mocks.connection_simulator import ConnectionSimulator
from src.integrations.clients.mocks.identifiers import RandomIdentifierGenerator
from src.utils.config_loader import AppConfig

FAST_TIMEOUT_SECONDS = 0.2


@pytest.fixture
def memory_store():
    return InMemoryEventStore(capacity=10)


@pytest.fixture
def file_store(tmp_path):
    return FileEventStore(tmp_path / "logs", today=lambda: date(2026, 10, 17))


@pytest.fixture
def simulator(memory_store):
    """Seeded simulator whose timeout bank answers after a fraction of a second."""
    return ConnectionSimulator(
        event_store=memory_store,
        identifiers=RandomIdentifierGenerator(seed=1234),
        timeout_delay_seconds=FAST_TIMEOUT_SECONDS,
    )


@pytest.fixture
def app_config(tmp_path):
    return AppConfig(
        event_store="memory",
        memory_capacity=10,
        timeout_delay_seconds=FAST_TIMEOUT_SECONDS,
        client_build_dir=str(tmp_path / "client-build"),
    )


@pytest.fixture
def app(app_config, simulator):
    return create_app(config=app_config, simulator=simulator)


@pytest.fixture
def client(app):
    return TestClient(app)
