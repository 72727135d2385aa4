import pytest

from beyonder.models.resource import RESOURCE_PATHS, ResourceKind, describe, is_deletable, resource_path


@pytest.mark.parametrize("kind, name, secondary, expected", [
    (ResourceKind.PIPELINE, "my-pipeline", None, "/_ingest/pipeline/my-pipeline"),
    (ResourceKind.INDEX, "twitter", None, "/twitter"),
    (ResourceKind.TEMPLATE, "twitter_template", None, "/_template/twitter_template"),
    (ResourceKind.INDEX_TEMPLATE, "logs_template", None, "/_index_template/logs_template"),
    (ResourceKind.COMPONENT_TEMPLATE, "base_settings", None, "/_component_template/base_settings"),
    (ResourceKind.MAPPING, "twitter", "tweet", "/twitter/_mapping/tweet"),
    (ResourceKind.MAPPING, "twitter", "_doc", "/twitter/_mapping"),
    (ResourceKind.MAPPING, "twitter", None, "/twitter/_mapping"),
])
def test_resource_path(kind, name, secondary, expected):
    assert resource_path(kind, name, secondary) == expected


def test_every_kind_has_a_path():
    assert set(RESOURCE_PATHS.keys()) == set(ResourceKind)


def test_only_mappings_cannot_be_deleted():
    assert [kind for kind in ResourceKind if not is_deletable(kind)] == [ResourceKind.MAPPING]


def test_describe():
    assert describe(ResourceKind.PIPELINE, "my-pipeline") == "pipeline [my-pipeline]"
    assert describe(ResourceKind.MAPPING, "twitter", "tweet") == "mapping [twitter/tweet]"
