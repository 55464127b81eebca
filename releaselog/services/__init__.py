"""
Service layer for releaselog.

Contains the logic that orchestrates domain objects and infrastructure:
- bucketize: Partition commits into release buckets
- RenderPipeline: Drive renderers through the changelog events
- ChangelogGenerator: Load, bucket and render in one run

Services are the primary API for commands to use.
"""

from .bucketizer import bucketize
from .pipeline import RenderPipeline
from .generator import ChangelogGenerator, EPOCH, to_timestamp

__all__ = [
    'bucketize',
    'RenderPipeline',
    'ChangelogGenerator',
    'EPOCH',
    'to_timestamp',
]
