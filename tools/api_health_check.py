#!/usr/bin/env python3
"""
Extender health check.
Posts known requests to a running extender and validates status codes and
response shapes, including the error paths the scheduler can trigger.
"""

from __future__ import annotations

import sys
import argparse
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass

import requests


@dataclass
class EndpointTest:
    """Test case for an extender endpoint."""
    method: str
    path: str
    name: str
    payload: Optional[Any] = None
    raw_body: Optional[bytes] = None
    expected_status: int = 200
    validate_func: Optional[Callable[[Any], bool]] = None


SAMPLE_ARGS = {
    "Pod": {
        "metadata": {"name": "health-check"},
        "spec": {"containers": [{"name": "web", "image": "nginx:1.7.9"}]},
    },
    "Nodes": {
        "Items": [
            {"metadata": {"name": "node-a"},
             "status": {"images": [{"names": ["docker.io/library/nginx:1.7.9"], "sizeBytes": 1}]}},
            {"metadata": {"name": "node-b"}, "status": {"images": []}},
        ]
    },
}


class ExtenderHealthChecker:
    def __init__(self, base_url: str, priorities_path: str, verb: str):
        self.base_url = base_url.rstrip('/')
        self.route = f"{priorities_path}/{verb}"
        self.results: List[Dict[str, Any]] = []

    def test_endpoint(self, test: EndpointTest) -> Dict[str, Any]:
        url = f"{self.base_url}{test.path}"
        result: Dict[str, Any] = {"name": test.name, "status": "ok", "errors": []}
        try:
            if test.method == "GET":
                response = requests.get(url, timeout=10)
            elif test.raw_body is not None:
                response = requests.post(url, data=test.raw_body, timeout=10,
                                         headers={"Content-Type": "application/json"})
            else:
                response = requests.post(url, json=test.payload, timeout=10)
        except requests.exceptions.Timeout:
            result["errors"].append("Request timeout")
        except requests.exceptions.ConnectionError:
            result["errors"].append("Connection error - extender not accessible")
        else:
            result["status_code"] = response.status_code
            result["response_time_ms"] = response.elapsed.total_seconds() * 1000
            if response.status_code != test.expected_status:
                result["errors"].append(f"Expected status {test.expected_status}, got {response.status_code}")
            elif test.validate_func:
                try:
                    data = response.json()
                except ValueError:
                    result["errors"].append(f"Response is not valid JSON: {response.text[:500]}")
                else:
                    if not test.validate_func(data):
                        result["errors"].append(f"Unexpected response: {response.text[:500]}")
        if result["errors"]:
            result["status"] = "error"
        return result

    def _get_test_cases(self) -> List[EndpointTest]:
        return [
            EndpointTest(
                method="GET", path="/healthz", name="Liveness",
                validate_func=lambda d: d.get("status") == "ok",
            ),
            EndpointTest(
                method="POST", path=self.route, name="Prioritize - sample pod",
                payload=SAMPLE_ARGS,
                validate_func=lambda d: d == [{"Host": "node-a", "Score": 1}, {"Host": "node-b", "Score": 0}],
            ),
            EndpointTest(
                method="POST", path=self.route, name="Prioritize - empty body",
                raw_body=b"", expected_status=400,
            ),
            EndpointTest(
                method="POST", path=self.route, name="Prioritize - malformed body",
                raw_body=b"{not json", expected_status=400,
            ),
            EndpointTest(
                method="POST", path=self.route, name="Prioritize - still serving",
                payload=SAMPLE_ARGS,
                validate_func=lambda d: len(d) == 2,
            ),
        ]

    def run_all_tests(self) -> bool:
        print("=" * 70)
        print("EXTENDER HEALTH CHECK")
        print("=" * 70)
        print(f"Testing: {self.base_url}\n")
        ok = True
        for test in self._get_test_cases():
            print(f"Testing {test.name}...", end=" ", flush=True)
            result = self.test_endpoint(test)
            self.results.append(result)
            if result["status"] == "ok":
                print(f"✓ ({result['response_time_ms']:.1f}ms)")
            else:
                ok = False
                print(f"✗ {', '.join(result['errors'])}")
        return ok


def main() -> None:
    parser = argparse.ArgumentParser(description="Extender health check")
    parser.add_argument("--url", default="http://localhost:8080")
    parser.add_argument("--priorities-path", default="/my_scheduler_extension/my_new_priorities")
    parser.add_argument("--verb", default="image_score")
    args = parser.parse_args()

    checker = ExtenderHealthChecker(args.url, args.priorities_path, args.verb)
    sys.exit(0 if checker.run_all_tests() else 1)


if __name__ == "__main__":
    main()
