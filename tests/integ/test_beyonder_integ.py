"""
Runs the provisioning scenarios against a live cluster.

The cluster is located with TESTS_CLUSTER_HOST, TESTS_CLUSTER_SCHEME and TESTS_CLUSTER_REST_PORT.
Every test is skipped when nothing answers there.
"""
import logging
import os
import pathlib

import pytest
import requests

import beyonder.logic.beyonder as beyonder_
from beyonder.models.cluster import Cluster, HttpMethod
from beyonder.models.resource import ProvisionOutcome

logger = logging.getLogger(__name__)

MODELS = pathlib.Path(__file__).parent.parent / "data" / "models"

TEST_CLUSTER_HOST = os.environ.get("TESTS_CLUSTER_HOST", "127.0.0.1")
TEST_CLUSTER_SCHEME = os.environ.get("TESTS_CLUSTER_SCHEME", "http")
TEST_CLUSTER_REST_PORT = int(os.environ.get("TESTS_CLUSTER_REST_PORT", "9400"))


@pytest.fixture(scope="module")
def cluster():
    cluster = Cluster({
        "endpoint": f"{TEST_CLUSTER_SCHEME}://{TEST_CLUSTER_HOST}:{TEST_CLUSTER_REST_PORT}",
        "allow_insecure": True,
        "timeout": 10,
        "no_auth": None,
    })
    try:
        version = cluster.call_api("/").json()["version"]["number"]
    except requests.exceptions.ConnectionError as e:
        pytest.skip(f"Integration tests are skipped: [{e}]")
    logger.info(f"Starting integration tests against an external cluster running version [{version}]")
    return cluster


@pytest.fixture(autouse=True)
def clean_cluster(cluster):
    yield
    for path in ["/twitter", "/logs-archive", "/_template/twitter_template", "/_index_template/logs_template",
                 "/_component_template/base_settings", "/_ingest/pipeline/my-pipeline"]:
        cluster.call_api(path, HttpMethod.DELETE, raise_error=False)


def test_default_dir(cluster, monkeypatch):
    monkeypatch.chdir(MODELS.parent)
    results = beyonder_.start(cluster)
    assert results["index:twitter"] == ProvisionOutcome.CREATED


def test_one_index_one_type_is_idempotent(cluster):
    root = MODELS / "oneindexonetype"
    assert beyonder_.create_index(cluster, "twitter", root) == ProvisionOutcome.CREATED
    assert beyonder_.create_index(cluster, "twitter", root) == ProvisionOutcome.UNCHANGED
    assert beyonder_.create_index(cluster, "twitter", root, force=True) == ProvisionOutcome.RECREATED


def test_settings_analyzer(cluster):
    beyonder_.create_index(cluster, "twitter", MODELS / "settingsanalyzer")
    settings = cluster.call_api("/twitter/_settings").json()
    assert "francais" in settings["twitter"]["settings"]["index"]["analysis"]["analyzer"]


def test_one_index_no_type(cluster):
    results = beyonder_.start(cluster, MODELS / "oneindexnotype")
    assert results == {"index:twitter": ProvisionOutcome.CREATED}


def test_template(cluster):
    results = beyonder_.start(cluster, MODELS / "template")
    assert results == {"template:twitter_template": ProvisionOutcome.CREATED}
    assert cluster.call_api("/_template/twitter_template", raise_error=False).status_code == 200


def test_pipeline(cluster):
    assert beyonder_.create_pipeline(cluster, "my-pipeline", MODELS / "pipeline") == ProvisionOutcome.CREATED
    assert beyonder_.create_pipeline(cluster, "my-pipeline", MODELS / "pipeline") == ProvisionOutcome.UNCHANGED


def test_update_settings(cluster):
    beyonder_.create_index(cluster, "twitter", MODELS / "update-settings/step1")
    results = beyonder_.start(cluster, MODELS / "update-settings/step2")
    assert results["index_settings:twitter"] == ProvisionOutcome.UPDATED
    settings = cluster.call_api("/twitter/_settings").json()
    assert settings["twitter"]["settings"]["index"]["number_of_replicas"] == "1"


def test_wrong_root_dir(cluster):
    assert beyonder_.start(cluster, MODELS / "bad-classpath/doesnotexist") == {}
