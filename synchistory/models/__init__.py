"""Models for the job store."""

from .attempt import Attempt
from .job import Job
from .stream_stats import StreamStats
