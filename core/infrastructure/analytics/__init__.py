"""Analytics snapshot computation."""
from .snapshot_builder import SqlAnalyticsSnapshotBuilder

__all__ = ["SqlAnalyticsSnapshotBuilder"]
