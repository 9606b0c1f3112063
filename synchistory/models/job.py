"""Job model."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from synchistory.models._base import Base

if TYPE_CHECKING:
    from synchistory.models.attempt import Attempt


class Job(Base):
    """Job model.

    ``scope`` holds the connection id for replication jobs and the
    connector image for spec/check/discover jobs.
    """

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    config_type: Mapped[str] = mapped_column(String(50), nullable=False)
    scope: Mapped[str] = mapped_column(String(255), nullable=False)
    workspace_id: Mapped[Optional[UUID]] = mapped_column(nullable=True)
    config: Mapped[dict] = mapped_column(JSONB, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    attempts: Mapped[list["Attempt"]] = relationship(
        "Attempt",
        back_populates="job",
        lazy="selectin",
        order_by="Attempt.attempt_number",
    )

    __table_args__ = (
        Index("idx_jobs_scope", "scope"),
        Index("idx_jobs_status", "status"),
        Index("idx_jobs_config_type", "config_type"),
        Index("idx_jobs_scope_created_at", "scope", "created_at"),
        Index("idx_jobs_workspace_id", "workspace_id"),
    )
