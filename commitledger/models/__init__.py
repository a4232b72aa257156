"""SQLAlchemy ORM models — one file per table."""

from commitledger.models.assignment import Assignment
from commitledger.models.metric import Metric
from commitledger.models.metric_source import MetricSource
from commitledger.models.participant import Participant
from commitledger.models.team import Team

__all__ = [
    "Assignment",
    "Team",
    "Participant",
    "MetricSource",
    "Metric",
]
