import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest
import yaml

from app import main
from extender.api import create_app
from extender.config import ExtenderConfig
from extender.policy import scheduler_policy


def test_policy_points_at_registered_route():
    config = ExtenderConfig.create()
    policy = scheduler_policy(config, "http://extender:80/", weight=5)

    ext = policy["extenders"][0]
    assert policy["kind"] == "Policy"
    assert ext["urlPrefix"] == "http://extender:80/my_scheduler_extension/my_new_priorities"
    assert ext["prioritizeVerb"] == "image_score"
    assert ext["weight"] == 5
    assert ext["enableHttps"] is False

    # The scheduler calls urlPrefix/prioritizeVerb
    route = ext["urlPrefix"][len("http://extender:80"):] + "/" + ext["prioritizeVerb"]
    rules = {r.rule for r in create_app(config).url_map.iter_rules()}
    assert route in rules


def test_kube_scheduler_configuration_format():
    config = ExtenderConfig.create(api_prefix="/ext", priorities_prefix="/p")
    policy = scheduler_policy(config, "https://extender.kube-system.svc", fmt="KubeSchedulerConfiguration")

    assert policy["kind"] == "KubeSchedulerConfiguration"
    ext = policy["extenders"][0]
    assert ext["urlPrefix"] == "https://extender.kube-system.svc/ext/p"
    assert ext["enableHTTPS"] is True


def test_policy_rejects_bad_arguments():
    config = ExtenderConfig.create()

    with pytest.raises(ValueError):
        scheduler_policy(config, "http://x", fmt="xml")
    with pytest.raises(ValueError):
        scheduler_policy(config, "http://x", weight=0)


def test_cli_prints_policy(capsys):
    main(["--print-policy", "http://extender:8080", "--api-prefix", "ext", "--weight", "2"])

    policy = yaml.safe_load(capsys.readouterr().out)
    assert policy["extenders"][0]["urlPrefix"] == "http://extender:8080/ext/my_new_priorities"
    assert policy["extenders"][0]["weight"] == 2
