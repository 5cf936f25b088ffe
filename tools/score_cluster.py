#!/usr/bin/env python3
"""Score a pod manifest against the live cluster's nodes.

Example:
    python tools/score_cluster.py \
        --pod deploy/nginx-pod.yaml \
        --url http://localhost:8080/my_scheduler_extension/my_new_priorities/image_score

Without --url the registered priority methods are run in-process, which is
handy for checking what the extender would answer before deploying it.
"""
from __future__ import annotations

import sys
import argparse
from pathlib import Path
from typing import Any, Dict, List

sys.path.append(str(Path(__file__).resolve().parents[1]))

import requests
import yaml

from extender.k8s import list_nodes, load_core_api
from extender.models import ExtenderArgs, HostPriority, Pod
from extender.priorities import DEFAULT_PRIORITIES


def load_pod(path: Path) -> Pod:
    manifest = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(manifest, dict) or manifest.get("kind", "Pod") != "Pod":
        raise SystemExit(f"{path} is not a Pod manifest")
    return ExtenderArgs.from_dict({"Pod": manifest, "Nodes": {"Items": []}}).pod


def score_remote(url: str, args: ExtenderArgs, timeout: float) -> List[HostPriority]:
    resp = requests.post(url, json=args.to_dict(), timeout=timeout)
    resp.raise_for_status()
    data: List[Dict[str, Any]] = resp.json()
    return [HostPriority(host=e["Host"], score=int(e["Score"])) for e in data]


def main() -> None:
    parser = argparse.ArgumentParser(description="Score a pod against cluster nodes")
    parser.add_argument("--pod", required=True, type=Path, help="pod manifest (YAML)")
    parser.add_argument("--kubeconfig", default=None)
    parser.add_argument("--url", default=None, help="full prioritize route of a running extender")
    parser.add_argument("--timeout", type=float, default=10.0)
    args = parser.parse_args()

    pod = load_pod(args.pod)
    nodes = list_nodes(load_core_api(args.kubeconfig))
    if not nodes:
        raise SystemExit("cluster reported no nodes")
    extender_args = ExtenderArgs(pod=pod, nodes=nodes)

    if args.url:
        results = {"remote": score_remote(args.url, extender_args, args.timeout)}
    else:
        results = {m.name: m.prioritize(pod, nodes) for m in DEFAULT_PRIORITIES}

    for method, priorities in results.items():
        print(f"{method} for pod {pod.name} ({len(pod.containers)} containers):")
        for p in sorted(priorities, key=lambda p: (-p.score, p.host)):
            print(f"  {p.host:<40} {p.score}")


if __name__ == "__main__":
    main()
