"""
Pipeline behaviors.

Each behavior wraps the rest of the pipeline: it receives the request and a
``next_`` coroutine factory and decides whether, and how, to call it.
"""

from medicaledu.core.application.behaviors.base import NextHandler, PipelineBehavior
from medicaledu.core.application.behaviors.cache_invalidation import CacheInvalidationBehavior
from medicaledu.core.application.behaviors.caching import CachingBehavior
from medicaledu.core.application.behaviors.logging import LoggingBehavior
from medicaledu.core.application.behaviors.performance import PerformanceMetricsBehavior
from medicaledu.core.application.behaviors.transaction import TransactionBehavior
from medicaledu.core.application.behaviors.validation import ValidationBehavior

__all__ = [
    "CacheInvalidationBehavior",
    "CachingBehavior",
    "LoggingBehavior",
    "NextHandler",
    "PerformanceMetricsBehavior",
    "PipelineBehavior",
    "TransactionBehavior",
    "ValidationBehavior",
]
