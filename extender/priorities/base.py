from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Iterable, List, Mapping

from extender.models import HostPriority, Node, Pod


class PrioritizeMethod(ABC):
	"""A named scoring function.

	``name`` is the last path segment of the route and must equal the
	prioritize verb in the scheduler's extender config.
	"""

	name: str = ""

	@abstractmethod
	def prioritize(self, pod: Pod, nodes: List[Node]) -> List[HostPriority]:
		raise NotImplementedError


def build_registry(methods: Iterable[PrioritizeMethod]) -> Mapping[str, PrioritizeMethod]:
	"""Index methods by name once at startup; the result is read-only."""
	registry = {}
	for method in methods:
		if not method.name:
			raise ValueError(f"priority method {type(method).__name__} has no name")
		if method.name in registry:
			raise ValueError(f"duplicate priority method name: {method.name}")
		registry[method.name] = method
	return MappingProxyType(registry)
