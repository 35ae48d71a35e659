"""Transformers for projecting source assets into inventory items.

This package contains base classes for transformers.
Backend-specific implementations live in the platforms/ directory.
"""

from .base import Transformer, merge_tags, standard_tags

__all__ = ["Transformer", "merge_tags", "standard_tags"]
