"""Per-stream attempt statistics model."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from synchistory.models._base import Base

if TYPE_CHECKING:
    from synchistory.models.attempt import Attempt


class StreamStats(Base):
    """Records and bytes emitted/committed for one stream in one attempt."""

    __tablename__ = "stream_stats"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    attempt_id: Mapped[int] = mapped_column(
        ForeignKey("attempts.id", ondelete="CASCADE", name="fk_stream_stats_attempt_id"),
        nullable=False,
    )
    stream_name: Mapped[str] = mapped_column(String, nullable=False)
    stream_namespace: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    records_emitted: Mapped[int] = mapped_column(BigInteger, default=0)
    bytes_emitted: Mapped[int] = mapped_column(BigInteger, default=0)
    records_committed: Mapped[int] = mapped_column(BigInteger, default=0)
    bytes_committed: Mapped[int] = mapped_column(BigInteger, default=0)

    attempt: Mapped["Attempt"] = relationship(
        "Attempt", back_populates="stream_stats", lazy="noload"
    )

    __table_args__ = (
        UniqueConstraint(
            "attempt_id", "stream_name", "stream_namespace", name="uq_stream_stats_attempt_stream"
        ),
        Index("idx_stream_stats_attempt_id", "attempt_id"),
    )
