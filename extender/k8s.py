"""Adapters from Kubernetes client objects to extender models."""

from __future__ import annotations

import logging
from typing import List, Optional

from kubernetes import client, config
from kubernetes.client import V1Node, V1Pod

from extender.models import Container, ImageRecord, Node, Pod

logger = logging.getLogger(__name__)


def pod_from_v1(pod: V1Pod) -> Pod:
    containers = [
        Container(name=c.name or "", image=c.image or "")
        for c in (pod.spec.containers if pod.spec else None) or []
    ]
    return Pod(
        name=pod.metadata.name,
        namespace=pod.metadata.namespace or "default",
        containers=containers,
    )


def node_from_v1(node: V1Node) -> Node:
    images = []
    if node.status and node.status.images:
        for img in node.status.images:
            images.append(ImageRecord(names=list(img.names or []), size_bytes=img.size_bytes or 0))
    return Node(name=node.metadata.name, images=images)


def load_core_api(kubeconfig: Optional[str] = None) -> client.CoreV1Api:
    """Load in-cluster config, falling back to a kubeconfig file."""
    if kubeconfig:
        config.load_kube_config(config_file=kubeconfig)
        logger.info(f"Loaded kubeconfig from {kubeconfig}")
    else:
        try:
            config.load_incluster_config()
            logger.info("Loaded in-cluster Kubernetes config")
        except config.ConfigException:
            config.load_kube_config()
            logger.info("Loaded kubeconfig")
    return client.CoreV1Api()


def list_nodes(core: client.CoreV1Api) -> List[Node]:
    return [node_from_v1(n) for n in core.list_node().items]
