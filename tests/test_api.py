import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from extender.api import EMPTY_REQUEST_MESSAGE, create_app
from extender.config import ExtenderConfig
from extender.priorities import ImageLocalityPriority
from extender.priorities.base import PrioritizeMethod

ROUTE = "/my_scheduler_extension/my_new_priorities/image_score"


def extender_args(containers, nodes, items_key="Items"):
    return {
        "Pod": {
            "metadata": {"name": "web-0", "namespace": "default"},
            "spec": {"containers": [{"name": f"c{i}", "image": img} for i, img in enumerate(containers)]},
        },
        "Nodes": {
            items_key: [
                {
                    "metadata": {"name": name},
                    "status": {"images": [{"names": names, "sizeBytes": 1024} for names in images]},
                }
                for name, images in nodes
            ]
        },
    }


class ExplodingPriority(PrioritizeMethod):
    name = "explode"

    def prioritize(self, pod, nodes):
        raise RuntimeError("boom")


class WrongHostsPriority(PrioritizeMethod):
    name = "wrong_hosts"

    def prioritize(self, pod, nodes):
        return ImageLocalityPriority().prioritize(pod, nodes[:1])


@pytest.fixture
def config():
    return ExtenderConfig.create()


@pytest.fixture
def client(config):
    app = create_app(config, methods=[ImageLocalityPriority(), ExplodingPriority(), WrongHostsPriority()])
    return app.test_client()


def test_prioritize_returns_host_priority_list(client):
    payload = extender_args(
        ["nginx:1.7.9"],
        [("A", [["docker.io/library/nginx:1.7.9"]]), ("B", [])],
    )

    resp = client.post(ROUTE, json=payload)

    assert resp.status_code == 200
    assert resp.mimetype == "application/json"
    assert resp.get_json() == [{"Host": "A", "Score": 1}, {"Host": "B", "Score": 0}]


def test_prioritize_accepts_lowercase_items(client):
    payload = extender_args(["nginx", "redis"], [("n1", [["nginx:latest"], ["redis:6"]])], items_key="items")

    resp = client.post(ROUTE, json=payload)

    assert resp.status_code == 200
    assert resp.get_json() == [{"Host": "n1", "Score": 2}]


def test_prioritize_with_no_nodes_returns_empty_list(client):
    resp = client.post(ROUTE, json=extender_args(["nginx"], []))

    assert resp.status_code == 200
    assert resp.get_json() == []


def test_empty_body_is_rejected(client):
    resp = client.post(ROUTE, data=b"", content_type="application/json")

    assert resp.status_code == 400
    assert resp.mimetype == "text/plain"
    assert resp.get_data(as_text=True) == EMPTY_REQUEST_MESSAGE


def test_malformed_body_does_not_stop_serving(client):
    bad = client.post(ROUTE, data=b"{not json", content_type="application/json")
    assert bad.status_code == 400

    good = client.post(ROUTE, json=extender_args(["nginx"], [("n1", [["nginx"]])]))
    assert good.status_code == 200
    assert good.get_json() == [{"Host": "n1", "Score": 1}]


@pytest.mark.parametrize(
    "body",
    [
        [],
        {"Nodes": {"Items": []}},
        {"Pod": {"metadata": {"name": "p"}}},
        {"Pod": {"metadata": {"name": "p"}}, "Nodes": {"Items": [{"metadata": {}}]}},
        {"Pod": {"metadata": {"name": "p"}}, "Nodes": {"Items": "n1"}},
    ],
)
def test_wrong_shape_is_rejected(client, body):
    resp = client.post(ROUTE, json=body)

    assert resp.status_code == 400


def test_duplicate_nodes_are_rejected(client):
    payload = extender_args(["nginx"], [("n1", []), ("n1", [])])

    resp = client.post(ROUTE, json=payload)

    assert resp.status_code == 400


def test_failing_method_returns_500(client):
    resp = client.post(
        "/my_scheduler_extension/my_new_priorities/explode",
        json=extender_args(["nginx"], [("n1", [])]),
    )

    assert resp.status_code == 500
    assert "boom" in resp.get_data(as_text=True)


def test_method_must_score_every_node(client):
    resp = client.post(
        "/my_scheduler_extension/my_new_priorities/wrong_hosts",
        json=extender_args(["nginx"], [("n1", []), ("n2", [])]),
    )

    assert resp.status_code == 500


def test_only_post_is_routed(client):
    assert client.get(ROUTE).status_code == 405
    assert client.post("/my_scheduler_extension/my_new_priorities/unknown", json={}).status_code == 404


def test_routes_use_normalized_prefixes():
    config = ExtenderConfig.create(api_prefix="ext", priorities_prefix="prio")
    client = create_app(config).test_client()

    resp = client.post("/ext/prio/image_score", json=extender_args(["nginx"], [("n1", [["nginx"]])]))

    assert resp.status_code == 200


def test_oversized_body_is_rejected():
    config = ExtenderConfig.create(max_content_length=64)
    client = create_app(config).test_client()

    resp = client.post(ROUTE, json=extender_args(["nginx"] * 10, [("n1", [["nginx"]])]))

    assert resp.status_code == 413


def test_healthz_lists_priorities(client):
    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "priorities": ["explode", "image_score", "wrong_hosts"]}


def test_deeply_nested_body_is_rejected_as_malformed(client):
    body = b"[" * 100000 + b"]" * 100000

    resp = client.post(ROUTE, data=body, content_type="application/json")

    assert resp.status_code == 400
    assert resp.mimetype == "text/plain"
    assert resp.get_data(as_text=True).startswith("cannot decode extender args")
