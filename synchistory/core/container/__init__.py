"""Dependency Injection Container Module.

Usage:
------
    # Initialize at startup (call once)
    from synchistory.core.container import initialize_container
    from synchistory.core.config import settings
    initialize_container(settings)

    # Import the global container after initialization
    from synchistory.core.container import container
    service = container.job_history_service

    # In tests (construct directly with fakes, don't use global)
    from synchistory.core.container import Container
    test_container = Container(
        job_repo=FakeJobRepository(),
        connection_client=FakeConnectionContextClient(),
        log_reader=FakeLogReader(),
        job_history_service=...,
    )

Module structure:
-----------------
    container/
    ├── __init__.py      # This file - exports public API
    ├── container.py     # Container dataclass (serves)
    └── factory.py       # create_container() (builds)
"""

from typing import TYPE_CHECKING

from synchistory.core.container.container import Container
from synchistory.core.container.factory import create_container, create_job_history_service

if TYPE_CHECKING:
    from synchistory.core.config import Settings

__all__ = [
    "Container",
    "container",
    "create_container",
    "create_job_history_service",
    "initialize_container",
    "reset_container",
]


container: Container | None = None
"""Global container instance, set by `initialize_container()` at startup.

Domain code never imports this; it receives dependencies as parameters.
"""


def initialize_container(settings: "Settings") -> None:
    """Initialize the global container. Call once at startup.

    Args:
        settings: Application settings from core/config

    Raises:
        RuntimeError: If called more than once (container already initialized)
    """
    global container

    if container is not None:
        raise RuntimeError(
            "Container already initialized. "
            "initialize_container() should only be called once at startup."
        )

    container = create_container(settings)


def reset_container() -> None:
    """Reset the global container to None. For testing only."""
    global container
    container = None
