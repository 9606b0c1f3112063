"""Request context for job history operations.

Carries the request identity, the feature flags evaluated for the caller
and a contextual logger. Services never evaluate toggles themselves; they
read the decision from the context.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional
from uuid import UUID, uuid4

from synchistory.core.logging import ContextualLogger
from synchistory.core.shared_models import FeatureFlag


@dataclass
class ApiContext:
    """Context for a single request."""

    request_id: UUID = field(default_factory=uuid4)
    workspace_id: Optional[UUID] = None
    enabled_features: FrozenSet[FeatureFlag] = frozenset()

    logger: ContextualLogger = field(default=None, kw_only=True, repr=False)

    def __post_init__(self):
        """Auto-derive logger from the request identity if not provided."""
        if self.logger is None:
            from synchistory.core.logging import logger as base_logger

            self.logger = base_logger.with_context(
                request_id=str(self.request_id),
                workspace_id=str(self.workspace_id) if self.workspace_id else None,
            )

    def has_feature(self, flag: FeatureFlag) -> bool:
        """Check if a feature is enabled for this request.

        Args:
            flag: Feature flag to check

        Returns:
            True if enabled, False otherwise
        """
        return flag in self.enabled_features
