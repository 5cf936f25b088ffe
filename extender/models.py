"""Records exchanged with the scheduler over the extender protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from extender.errors import MalformedRequestError


@dataclass
class Container:
    name: str
    image: str  # repository[:tag], as written in the pod spec


@dataclass
class Pod:
    name: str
    containers: List[Container] = field(default_factory=list)
    namespace: str = "default"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {"containers": [{"name": c.name, "image": c.image} for c in self.containers]},
        }


@dataclass
class ImageRecord:
    """An image cached on a node, possibly known under several names (tags, digests)."""
    names: List[str] = field(default_factory=list)
    size_bytes: int = 0


@dataclass
class Node:
    name: str
    images: List[ImageRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": {"name": self.name},
            "status": {
                "images": [{"names": list(img.names), "sizeBytes": img.size_bytes} for img in self.images]
            },
        }


@dataclass
class HostPriority:
    host: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"Host": self.host, "Score": self.score}


@dataclass
class ExtenderArgs:
    pod: Pod
    nodes: List[Node]

    @classmethod
    def from_dict(cls, body: Any) -> "ExtenderArgs":
        """Decode a prioritize request body.

        Keys are matched case-insensitively, so both ``Nodes.Items`` and the
        ``Nodes.items`` emitted by the scheduler are accepted.
        """
        if not isinstance(body, dict):
            raise MalformedRequestError("request body must be a JSON object")
        pod_spec = _field(body, "Pod")
        if pod_spec is None:
            raise MalformedRequestError("request is missing the Pod")
        node_list = _field(body, "Nodes")
        if node_list is None:
            raise MalformedRequestError("request is missing the Nodes")
        _expect(node_list, dict, "Nodes")
        items = _list_field(node_list, "Items", "Nodes.Items")

        nodes = [_node_from_dict(item, i) for i, item in enumerate(items)]
        seen = set()
        for node in nodes:
            if node.name in seen:
                raise MalformedRequestError(f"duplicate node {node.name} in request")
            seen.add(node.name)
        return cls(pod=_pod_from_dict(pod_spec), nodes=nodes)

    def to_dict(self) -> Dict[str, Any]:
        return {"Pod": self.pod.to_dict(), "Nodes": {"Items": [n.to_dict() for n in self.nodes]}}


_KIND_NAMES = {dict: "JSON object", list: "JSON array", str: "string", int: "integer"}


def _field(obj: Dict[str, Any], key: str) -> Any:
    if key in obj:
        return obj[key]
    lowered = key.lower()
    for k, v in obj.items():
        if isinstance(k, str) and k.lower() == lowered:
            return v
    return None


def _expect(value: Any, kind: type, where: str) -> None:
    if not isinstance(value, kind) or isinstance(value, bool):
        raise MalformedRequestError(f"{where} must be a {_KIND_NAMES[kind]}, got {type(value).__name__}")


def _list_field(obj: Dict[str, Any], key: str, where: str) -> List[Any]:
    value = _field(obj, key)
    if value is None:
        return []
    _expect(value, list, where)
    return value


def _str_field(obj: Dict[str, Any], key: str, where: str, default: Optional[str] = None) -> str:
    value = _field(obj, key)
    if value is None:
        if default is None:
            raise MalformedRequestError(f"{where} is required")
        return default
    _expect(value, str, where)
    return value


def _metadata_name(obj: Dict[str, Any], where: str) -> str:
    meta = _field(obj, "metadata")
    if meta is None:
        raise MalformedRequestError(f"{where}.metadata is required")
    _expect(meta, dict, f"{where}.metadata")
    return _str_field(meta, "name", f"{where}.metadata.name")


def _pod_from_dict(pod: Any) -> Pod:
    _expect(pod, dict, "Pod")
    name = _metadata_name(pod, "Pod")
    namespace = _str_field(_field(pod, "metadata"), "namespace", "Pod.metadata.namespace", default="default")
    spec = _field(pod, "spec") or {}
    _expect(spec, dict, "Pod.spec")
    containers = []
    for i, ctnr in enumerate(_list_field(spec, "containers", "Pod.spec.containers")):
        where = f"Pod.spec.containers[{i}]"
        _expect(ctnr, dict, where)
        containers.append(
            Container(
                name=_str_field(ctnr, "name", f"{where}.name", default=""),
                image=_str_field(ctnr, "image", f"{where}.image", default=""),
            )
        )
    return Pod(name=name, containers=containers, namespace=namespace)


def _node_from_dict(node: Any, index: int) -> Node:
    where = f"Nodes.Items[{index}]"
    _expect(node, dict, where)
    name = _metadata_name(node, where)
    status = _field(node, "status") or {}
    _expect(status, dict, f"{where}.status")
    images = []
    for j, img in enumerate(_list_field(status, "images", f"{where}.status.images")):
        img_where = f"{where}.status.images[{j}]"
        _expect(img, dict, img_where)
        names = _list_field(img, "names", f"{img_where}.names")
        for k, img_name in enumerate(names):
            _expect(img_name, str, f"{img_where}.names[{k}]")
        size = _field(img, "sizeBytes")
        if size is None:
            size = 0
        _expect(size, int, f"{img_where}.sizeBytes")
        images.append(ImageRecord(names=list(names), size_bytes=size))
    return Node(name=name, images=images)
