from enum import Enum
from typing import Dict, NamedTuple, Optional

# Type name that stands for "no type" on typeless (7.x+) clusters
DEFAULT_TYPE_NAME = "_doc"


class ResourceKind(Enum):
    INDEX = "index"
    MAPPING = "mapping"
    TEMPLATE = "template"
    INDEX_TEMPLATE = "index_template"
    COMPONENT_TEMPLATE = "component_template"
    PIPELINE = "pipeline"


class ExistenceState(Enum):
    EXISTS = "exists"
    ABSENT = "absent"


class ProvisionOutcome(Enum):
    CREATED = "created"
    RECREATED = "recreated"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


class ResourcePath(NamedTuple):
    # Formatted with `name`, and `secondary` when the kind has one
    path: str
    deletable: bool = True
    # Used instead of `path` when the secondary name is missing or is the default type
    path_without_secondary: Optional[str] = None


RESOURCE_PATHS: Dict[ResourceKind, ResourcePath] = {
    ResourceKind.INDEX: ResourcePath("/{name}"),
    ResourceKind.MAPPING: ResourcePath("/{name}/_mapping/{secondary}", deletable=False,
                                       path_without_secondary="/{name}/_mapping"),
    ResourceKind.TEMPLATE: ResourcePath("/_template/{name}"),
    ResourceKind.INDEX_TEMPLATE: ResourcePath("/_index_template/{name}"),
    ResourceKind.COMPONENT_TEMPLATE: ResourcePath("/_component_template/{name}"),
    ResourceKind.PIPELINE: ResourcePath("/_ingest/pipeline/{name}"),
}


def resource_path(kind: ResourceKind, name: str, secondary: Optional[str] = None) -> str:
    entry = RESOURCE_PATHS[kind]
    if entry.path_without_secondary and secondary in (None, DEFAULT_TYPE_NAME):
        return entry.path_without_secondary.format(name=name)
    return entry.path.format(name=name, secondary=secondary)


def is_deletable(kind: ResourceKind) -> bool:
    return RESOURCE_PATHS[kind].deletable


def describe(kind: ResourceKind, name: str, secondary: Optional[str] = None) -> str:
    """Human readable label such as `pipeline [my-pipeline]` or `mapping [twitter/tweet]`."""
    label = f"{name}/{secondary}" if secondary else name
    return f"{kind.value} [{label}]"
