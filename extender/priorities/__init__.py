"""Scoring methods served by the extender."""

from extender.priorities.base import PrioritizeMethod, build_registry
from extender.priorities.image_locality import ImageLocalityPriority, node_image_score

# Registered once at startup; each entry gets its own route.
DEFAULT_PRIORITIES = (ImageLocalityPriority(),)

__all__ = [
	'PrioritizeMethod',
	'build_registry',
	'ImageLocalityPriority',
	'node_image_score',
	'DEFAULT_PRIORITIES',
]
