"""Configuration enums."""

from enum import Enum


class Environment(str, Enum):
    """Deployment environment."""

    LOCAL = "local"
    DEV = "dev"
    PRD = "prd"

    @property
    def is_local(self) -> bool:
        """Whether this is a developer machine."""
        return self == Environment.LOCAL
