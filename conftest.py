"""Root conftest for pytest configuration and shared fixtures.

This conftest is loaded before both testpaths (tests/ and synchistory/),
making its fixtures available to centralized tests AND colocated domain tests.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables: must be set before any synchistory module import
# Uses setdefault so real env vars (CI) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "local")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test_user")
os.environ.setdefault("POSTGRES_PASSWORD", "test_password")
os.environ.setdefault("POSTGRES_DB", "test_db")
os.environ.setdefault("TEMPORAL_ENABLED", "false")
os.environ.setdefault("PLATFORM_VERSION", "0.1.0-test")


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_job_repo():
    """Fake JobRepository backed by an in-memory job store."""
    from synchistory.domains.jobs.fakes.repository import FakeJobRepository

    return FakeJobRepository()


@pytest.fixture
def fake_connection_client():
    """Fake ConnectionContextClient with seedable connections and definitions."""
    from synchistory.domains.connections.fakes.client import FakeConnectionContextClient

    return FakeConnectionContextClient()


@pytest.fixture
def fake_log_reader():
    """Fake LogReader with seedable log tails."""
    from synchistory.domains.logs.fakes.reader import FakeLogReader

    return FakeLogReader()


@pytest.fixture
def fake_workflow_state_reader():
    """Fake WorkflowStateReader with seedable states."""
    from synchistory.domains.temporal.fakes.service import FakeWorkflowStateReader

    return FakeWorkflowStateReader()


@pytest.fixture
def test_container(
    fake_job_repo,
    fake_connection_client,
    fake_log_reader,
    fake_workflow_state_reader,
):
    """A Container whose collaborators are all fakes, with a real service on top.

    For partial overrides, use container.replace():
        no_temporal = test_container.replace(workflow_state_reader=None)
    """
    from synchistory.core.config import settings
    from synchistory.core.container import Container, create_job_history_service

    return Container(
        job_repo=fake_job_repo,
        connection_client=fake_connection_client,
        log_reader=fake_log_reader,
        workflow_state_reader=fake_workflow_state_reader,
        job_history_service=create_job_history_service(
            settings,
            job_repo=fake_job_repo,
            connection_client=fake_connection_client,
            log_reader=fake_log_reader,
            workflow_state_reader=fake_workflow_state_reader,
        ),
    )
