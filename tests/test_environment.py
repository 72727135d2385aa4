import pathlib

import pytest

from beyonder.environment import Environment
from beyonder.models.cluster import AuthMethod, Cluster

TEST_DATA_DIRECTORY = pathlib.Path(__file__).parent / "data"
VALID_SERVICES_YAML = TEST_DATA_DIRECTORY / "services.yaml"


def test_environment_from_config_file():
    env = Environment(config_file=VALID_SERVICES_YAML)
    assert isinstance(env.cluster, Cluster)
    assert env.cluster.endpoint == "http://elasticsearch:9200"
    assert env.cluster.auth_type == AuthMethod.BASIC_AUTH
    assert env.cluster.timeout == 30
    assert env.client_options.user_agent_extra == "beyonder-tests/1.0"
    assert env.root == "models/full"
    assert env.force is False


def test_environment_defaults():
    env = Environment(config={"cluster": {"endpoint": "http://localhost:9200", "no_auth": None}})
    assert env.root == "elasticsearch"
    assert env.force is False
    assert env.client_options is None


def test_environment_requires_a_cluster():
    with pytest.raises(ValueError) as excinfo:
        Environment(config={"beyonder": {"root": "es"}})
    assert excinfo.value.args[1] == {"cluster": ["required field"]}


def test_environment_refuses_unknown_sections():
    with pytest.raises(ValueError):
        Environment(config={"cluster": {"endpoint": "http://localhost:9200", "no_auth": None}, "replay": {}})


def test_environment_refuses_bad_force_value():
    with pytest.raises(ValueError):
        Environment(config={"cluster": {"endpoint": "http://localhost:9200", "no_auth": None},
                            "beyonder": {"force": "yes"}})


def test_environment_needs_config():
    with pytest.raises(ValueError, match="Either config or config_file must be provided."):
        Environment()


def test_empty_config_file_is_refused(tmp_path):
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    with pytest.raises(ValueError, match="Invalid config file"):
        Environment(config_file=empty)
