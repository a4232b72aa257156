"""metrics table."""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, Text, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from commitledger.core.database import Base, TimestampMixin


class Metric(TimestampMixin, Base):
    __tablename__ = "metrics"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    metric_source_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("metric_sources.id", ondelete="RESTRICT"),
        nullable=False,
    )
    team_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
    )
    github_id: Mapped[str] = mapped_column(Text, nullable=False)
    participant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("participants.id", ondelete="SET NULL")
    )
    total_commits: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )

    __table_args__ = (
        UniqueConstraint("team_id", "github_id", name="uq_metrics_team_github"),
        Index("idx_metrics_team", "team_id"),
    )
