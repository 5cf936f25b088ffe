"""Scheduler-side configuration that points the scheduler at this extender."""

from __future__ import annotations

from typing import Any, Dict

from extender.config import ExtenderConfig
from extender.priorities import ImageLocalityPriority

POLICY_FORMATS = ("policy", "kubeschedulerconfiguration")


def scheduler_policy(
	config: ExtenderConfig,
	base_url: str,
	weight: int = 1,
	verb: str = ImageLocalityPriority.name,
	fmt: str = "policy",
) -> Dict[str, Any]:
	"""
	Render the extender section the scheduler needs to call ``verb``.

	The scheduler POSTs to ``urlPrefix + "/" + prioritizeVerb``, which is
	exactly the route registered for the method.

	Args:
		config: Resolved extender configuration
		base_url: Scheme and authority the scheduler uses, e.g. http://extender:80
		weight: Multiplier the scheduler applies to the extender's scores
		verb: Name of the registered priority method
		fmt: "policy" for a legacy Policy file, "kubeschedulerconfiguration"
			for a KubeSchedulerConfiguration
	"""
	if weight <= 0:
		raise ValueError(f"weight must be positive, got {weight}")
	url_prefix = base_url.rstrip("/") + config.priorities_path
	fmt = fmt.lower()

	if fmt == "policy":
		return {
			"kind": "Policy",
			"apiVersion": "v1",
			"extenders": [
				{
					"urlPrefix": url_prefix,
					"prioritizeVerb": verb,
					"weight": weight,
					"enableHttps": url_prefix.startswith("https://"),
					"nodeCacheCapable": False,
				}
			],
		}
	if fmt == "kubeschedulerconfiguration":
		return {
			"apiVersion": "kubescheduler.config.k8s.io/v1",
			"kind": "KubeSchedulerConfiguration",
			"extenders": [
				{
					"urlPrefix": url_prefix,
					"prioritizeVerb": verb,
					"weight": weight,
					"enableHTTPS": url_prefix.startswith("https://"),
					"nodeCacheCapable": False,
					"ignorable": True,
				}
			],
		}
	raise ValueError(f"unknown policy format: {fmt} (expected one of {', '.join(POLICY_FORMATS)})")
