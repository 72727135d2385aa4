"""
Resolves definition files under a resource root.

By default, indices are created with their default settings. Settings for an index named `twitter`
are picked up from `elasticsearch/twitter/_settings.json`:

    {
      "settings": {"number_of_shards": 3, "number_of_replicas": 2}
    }

Types are not created until a definition is found. A file named `elasticsearch/twitter/tweet.json`
is used as the mapping of type `tweet` in index `twitter`. Templates live in `_template/`,
`_index_templates/` and `_component_templates/`, ingest pipelines in `_pipeline/`.

A definition that has no file, or whose file is blank, is reported as `None`, never as an
error, so a root may carry any subset of definitions.
"""
import logging
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "elasticsearch"
JSON_FILE_EXTENSION = ".json"
INDEX_SETTINGS_FILE = "_settings"
UPDATE_INDEX_SETTINGS_FILE = "_update_settings"
TEMPLATE_DIR = "_template"
INDEX_TEMPLATE_DIR = "_index_templates"
COMPONENT_TEMPLATE_DIR = "_component_templates"
PIPELINE_DIR = "_pipeline"
# Files of an index directory that are not type mappings
RESERVED_INDEX_FILES = {INDEX_SETTINGS_FILE, UPDATE_INDEX_SETTINGS_FILE}

RootType = Optional[Union[str, Path]]


def resolve_root(root: RootType = None) -> Path:
    return Path(root) if root is not None else Path(DEFAULT_ROOT)


def read_definition(root: RootType, primary: str, secondary: Optional[str] = None) -> Optional[str]:
    """
    Read `{root}/{primary}.json`, or `{root}/{primary}/{secondary}.json` when a secondary name is given.
    Returns None when the file does not exist or holds only whitespace.
    """
    if not primary:
        raise ValueError("A definition name must not be empty")
    path = resolve_root(root) / primary
    if secondary is not None:
        path = path / secondary
    path = path.with_name(path.name + JSON_FILE_EXTENSION)
    if not path.is_file():
        logger.debug(f"No definition found at {path}")
        return None
    logger.debug(f"Reading definition from {path}")
    with open(path, encoding="utf-8") as f:
        definition = f.read()
    if not definition.strip():
        logger.warning(f"Definition file {path} is empty, ignoring it")
        return None
    return definition


def read_settings(root: RootType, index: str) -> Optional[str]:
    return read_definition(root, index, INDEX_SETTINGS_FILE)


def read_update_settings(root: RootType, index: str) -> Optional[str]:
    return read_definition(root, index, UPDATE_INDEX_SETTINGS_FILE)


def read_mapping(root: RootType, index: str, type_name: str) -> Optional[str]:
    return read_definition(root, index, type_name)


def read_template(root: RootType, template: str) -> Optional[str]:
    return read_definition(root, TEMPLATE_DIR, template)


def read_index_template(root: RootType, template: str) -> Optional[str]:
    return read_definition(root, INDEX_TEMPLATE_DIR, template)


def read_component_template(root: RootType, template: str) -> Optional[str]:
    return read_definition(root, COMPONENT_TEMPLATE_DIR, template)


def read_pipeline(root: RootType, pipeline: str) -> Optional[str]:
    return read_definition(root, PIPELINE_DIR, pipeline)


def _list_json_names(directory: Path, excluded=frozenset()) -> List[str]:
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.iterdir()
                  if p.is_file() and p.suffix == JSON_FILE_EXTENSION and p.stem not in excluded)


def find_indices(root: RootType = None) -> List[str]:
    """Index names are the sub-directories of the root whose name does not start with `_`."""
    directory = resolve_root(root)
    if not directory.is_dir():
        logger.debug(f"Resource root {directory} does not exist")
        return []
    return sorted(p.name for p in directory.iterdir() if p.is_dir() and not p.name.startswith("_"))


def find_types(root: RootType, index: str) -> List[str]:
    return _list_json_names(resolve_root(root) / index, RESERVED_INDEX_FILES)


def find_templates(root: RootType = None) -> List[str]:
    return _list_json_names(resolve_root(root) / TEMPLATE_DIR)


def find_index_templates(root: RootType = None) -> List[str]:
    return _list_json_names(resolve_root(root) / INDEX_TEMPLATE_DIR)


def find_component_templates(root: RootType = None) -> List[str]:
    return _list_json_names(resolve_root(root) / COMPONENT_TEMPLATE_DIR)


def find_pipelines(root: RootType = None) -> List[str]:
    return _list_json_names(resolve_root(root) / PIPELINE_DIR)
