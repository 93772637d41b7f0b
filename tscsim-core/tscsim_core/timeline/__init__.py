from .types import HostSegment, Migration, as_migration
from .timeline import MigrationTimeline, build_timeline
__all__ = ["HostSegment", "Migration", "MigrationTimeline", "as_migration", "build_timeline"]
