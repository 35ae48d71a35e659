"""Source adapters for the inventory pipeline.

This package contains base classes and interfaces for source adapters.
Backend-specific implementations live in the platforms/ directory.
"""

from .base import MergeCandidate, Source, SourceAsset

__all__ = ["Source", "SourceAsset", "MergeCandidate"]
