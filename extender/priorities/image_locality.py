from __future__ import annotations

import logging
from typing import List

from extender.models import HostPriority, Node, Pod
from extender.priorities.base import PrioritizeMethod

logger = logging.getLogger(__name__)


def node_image_score(pod: Pod, node: Node) -> int:
	"""Count the pod's containers whose image is already cached on the node.

	A container matches when its image reference is a substring of any name
	the node reports, so ``nginx`` matches ``docker.io/library/nginx:latest``
	(and also ``my-nginx-fork:latest``). Each container counts at most once.
	"""
	if not node.images:
		return 0
	count = 0
	for ctnr in pod.containers:
		if _first_match(ctnr.image, node) is not None:
			count += 1
	return count


def _first_match(image: str, node: Node):
	for record in node.images:
		for img_name in record.names:
			if image in img_name:
				logger.debug(f"nodeImage {img_name} matches container image {image} on node {node.name}")
				return img_name
	return None


class ImageLocalityPriority(PrioritizeMethod):
	name = "image_score"

	def prioritize(self, pod: Pod, nodes: List[Node]) -> List[HostPriority]:
		priorities: List[HostPriority] = []
		for node in nodes:
			score = node_image_score(pod, node)
			priorities.append(HostPriority(host=node.name, score=score))
			logger.debug(f"node {node.name} has priority score of {score} for pod {pod.name}")
		return priorities
