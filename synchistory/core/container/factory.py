"""Container Factory.

All construction logic lives here. The factory reads settings and builds
the container with environment-appropriate implementations.
"""

from typing import Optional

from synchistory.core.config import Settings
from synchistory.core.container.container import Container
from synchistory.core.logging import logger
from synchistory.db.session import create_engine, create_session_factory
from synchistory.domains.connections.client import HttpConnectionContextClient
from synchistory.domains.connections.protocols import ConnectionContextClientProtocol
from synchistory.domains.jobs.debug_info import JobDebugInfoAssembler
from synchistory.domains.jobs.protocols import JobRepositoryProtocol
from synchistory.domains.jobs.query import JobQueryPlanner
from synchistory.domains.jobs.repository import JobRepository
from synchistory.domains.jobs.service import JobHistoryService
from synchistory.domains.jobs.stats_hydration import StatsHydrator
from synchistory.domains.jobs.sync_progress import SyncProgressAggregator
from synchistory.domains.logs.protocols import LogReaderProtocol
from synchistory.domains.logs.reader import FilesystemLogReader
from synchistory.domains.temporal.protocols import WorkflowStateReaderProtocol
from synchistory.domains.temporal.service import TemporalWorkflowStateReader


def create_container(settings: Settings) -> Container:
    """Build container with environment-appropriate implementations.

    Args:
        settings: Application settings (from core/config)

    Returns:
        Fully constructed Container ready for use
    """
    job_repo = JobRepository(create_session_factory(create_engine(settings)))
    connection_client = HttpConnectionContextClient(
        base_url=settings.CONFIG_API_URL,
        timeout_seconds=settings.CONFIG_API_TIMEOUT_SECONDS,
    )
    log_reader = FilesystemLogReader(
        settings.LOG_STORAGE_ROOT, max_lines=settings.ATTEMPT_LOG_TAIL_LINES
    )
    workflow_state_reader = _create_workflow_state_reader(settings)

    return Container(
        job_repo=job_repo,
        connection_client=connection_client,
        log_reader=log_reader,
        workflow_state_reader=workflow_state_reader,
        job_history_service=create_job_history_service(
            settings,
            job_repo=job_repo,
            connection_client=connection_client,
            log_reader=log_reader,
            workflow_state_reader=workflow_state_reader,
        ),
    )


def create_job_history_service(
    settings: Settings,
    job_repo: JobRepositoryProtocol,
    connection_client: ConnectionContextClientProtocol,
    log_reader: LogReaderProtocol,
    workflow_state_reader: Optional[WorkflowStateReaderProtocol] = None,
) -> JobHistoryService:
    """Wire the job history service over the given collaborators."""
    planner = JobQueryPlanner(
        job_repo,
        default_page_size=settings.JOB_LIST_DEFAULT_PAGE_SIZE,
        max_page_size=settings.JOB_LIST_MAX_PAGE_SIZE,
    )
    hydrator = StatsHydrator(job_repo, max_concurrency=settings.STATS_FETCH_CONCURRENCY)
    return JobHistoryService(
        planner=planner,
        hydrator=hydrator,
        sync_progress=SyncProgressAggregator(planner, hydrator),
        debug_assembler=JobDebugInfoAssembler(
            planner,
            job_repo,
            connection_client,
            log_reader,
            workflow_state_reader=workflow_state_reader,
            platform_version=settings.PLATFORM_VERSION,
        ),
        log_reader=log_reader,
    )


def _create_workflow_state_reader(settings: Settings) -> Optional[WorkflowStateReaderProtocol]:
    if not settings.TEMPORAL_ENABLED:
        logger.info("Temporal disabled, debug info will not include workflow state")
        return None
    return TemporalWorkflowStateReader(settings.CONNECTION_WORKFLOW_ID_TEMPLATE)
