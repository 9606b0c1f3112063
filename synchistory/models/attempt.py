"""Attempt model."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from synchistory.models._base import Base

if TYPE_CHECKING:
    from synchistory.models.job import Job
    from synchistory.models.stream_stats import StreamStats


class Attempt(Base):
    """Attempt model."""

    __tablename__ = "attempts"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    job_id: Mapped[int] = mapped_column(
        ForeignKey("jobs.id", ondelete="CASCADE", name="fk_attempts_job_id"), nullable=False
    )
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    log_path: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    output: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)

    job: Mapped["Job"] = relationship("Job", back_populates="attempts", lazy="noload")
    stream_stats: Mapped[list["StreamStats"]] = relationship(
        "StreamStats",
        back_populates="attempt",
        lazy="noload",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("job_id", "attempt_number", name="uq_attempts_job_attempt_number"),
        Index("idx_attempts_job_id", "job_id"),
    )
