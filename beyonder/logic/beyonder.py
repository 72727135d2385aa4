import logging
from typing import Dict, Optional

from beyonder.logic import provisioner
from beyonder.logic.provisioner import JSON_HEADERS, ProvisioningError, UnexpectedStatusError
from beyonder.models import settings_reader
from beyonder.models.cluster import Cluster, HttpMethod
from beyonder.models.resource import ExistenceState, ProvisionOutcome, ResourceKind
from beyonder.models.settings_reader import RootType

logger = logging.getLogger(__name__)

# Body used for an index whose directory carries no _settings.json
DEFAULT_INDEX_SETTINGS = "{}"


def _provision_from(cluster: Cluster, kind: ResourceKind, name: str, definition: Optional[str], force: bool,
                    secondary: Optional[str] = None) -> ProvisionOutcome:
    if definition is None:
        logger.debug(f"No definition for {kind.value} [{name}], skipping")
        return ProvisionOutcome.SKIPPED
    return provisioner.provision(cluster, kind, name, definition, force=force, secondary=secondary)


# ##################### INDICES ###################

def create_index_with_settings(cluster: Cluster, index: str, settings: str,
                               force: bool = False) -> ProvisionOutcome:
    return provisioner.provision(cluster, ResourceKind.INDEX, index, settings, force=force)


def create_index(cluster: Cluster, index: str, root: RootType = None, force: bool = False) -> ProvisionOutcome:
    """Create an index from `{root}/{index}/_settings.json`. Skipped when there is no such file."""
    return _provision_from(cluster, ResourceKind.INDEX, index, settings_reader.read_settings(root, index), force)


def update_settings_with_json(cluster: Cluster, index: str, settings: str) -> ProvisionOutcome:
    if provisioner.check_exists(cluster, ResourceKind.INDEX, index) == ExistenceState.ABSENT:
        raise ProvisioningError(f"Can not update settings of index [{index}]: it does not exist")
    logger.debug(f"Updating settings of index [{index}]")
    r = cluster.call_api(f"/{index}/_settings", HttpMethod.PUT, data=settings.encode("utf-8"),
                         headers=JSON_HEADERS, raise_error=False)
    if r.status_code != 200:
        raise UnexpectedStatusError("update settings of", ResourceKind.INDEX, index, r)
    return ProvisionOutcome.UPDATED


def update_settings(cluster: Cluster, index: str, root: RootType = None) -> ProvisionOutcome:
    """Apply `{root}/{index}/_update_settings.json` to an existing index."""
    settings = settings_reader.read_update_settings(root, index)
    if settings is None:
        logger.debug(f"No settings update for index [{index}], skipping")
        return ProvisionOutcome.SKIPPED
    return update_settings_with_json(cluster, index, settings)


# ##################### MAPPINGS ###################

def create_mapping_with_json(cluster: Cluster, index: str, type_name: Optional[str], mapping: str,
                             force: bool = False) -> ProvisionOutcome:
    return provisioner.provision(cluster, ResourceKind.MAPPING, index, mapping, force=force, secondary=type_name)


def create_mapping(cluster: Cluster, index: str, type_name: str, root: RootType = None,
                   force: bool = False) -> ProvisionOutcome:
    return _provision_from(cluster, ResourceKind.MAPPING, index,
                           settings_reader.read_mapping(root, index, type_name), force, secondary=type_name)


# ##################### TEMPLATES ###################

def create_template_with_json(cluster: Cluster, template: str, json: str, force: bool = False) -> ProvisionOutcome:
    return provisioner.provision(cluster, ResourceKind.TEMPLATE, template, json, force=force)


def create_template(cluster: Cluster, template: str, root: RootType = None, force: bool = False) -> ProvisionOutcome:
    return _provision_from(cluster, ResourceKind.TEMPLATE, template,
                           settings_reader.read_template(root, template), force)


def create_index_template_with_json(cluster: Cluster, template: str, json: str,
                                    force: bool = False) -> ProvisionOutcome:
    return provisioner.provision(cluster, ResourceKind.INDEX_TEMPLATE, template, json, force=force)


def create_index_template(cluster: Cluster, template: str, root: RootType = None,
                          force: bool = False) -> ProvisionOutcome:
    return _provision_from(cluster, ResourceKind.INDEX_TEMPLATE, template,
                           settings_reader.read_index_template(root, template), force)


def create_component_template_with_json(cluster: Cluster, template: str, json: str,
                                        force: bool = False) -> ProvisionOutcome:
    return provisioner.provision(cluster, ResourceKind.COMPONENT_TEMPLATE, template, json, force=force)


def create_component_template(cluster: Cluster, template: str, root: RootType = None,
                              force: bool = False) -> ProvisionOutcome:
    return _provision_from(cluster, ResourceKind.COMPONENT_TEMPLATE, template,
                           settings_reader.read_component_template(root, template), force)


# ##################### PIPELINES ###################

def create_pipeline_with_json(cluster: Cluster, pipeline: str, json: str, force: bool = False) -> ProvisionOutcome:
    return provisioner.provision(cluster, ResourceKind.PIPELINE, pipeline, json, force=force)


def create_pipeline(cluster: Cluster, pipeline: str, root: RootType = None, force: bool = False) -> ProvisionOutcome:
    return _provision_from(cluster, ResourceKind.PIPELINE, pipeline,
                           settings_reader.read_pipeline(root, pipeline), force)


# ##################### AUTOSCAN ###################

def start(cluster: Cluster, root: RootType = None, force: bool = False) -> Dict[str, ProvisionOutcome]:
    """
    Provision everything found under the resource root, by convention.

    Pipelines and templates go first, so that indices created afterwards pick them up.
    Each index is then created, has its settings update applied, and gets its type mappings.
    A missing root provisions nothing.
    """
    resolved = settings_reader.resolve_root(root)
    logger.info(f"Starting provisioning from {resolved}")
    results: Dict[str, ProvisionOutcome] = {}

    for pipeline in settings_reader.find_pipelines(root):
        results[f"pipeline:{pipeline}"] = create_pipeline(cluster, pipeline, root, force)
    for template in settings_reader.find_component_templates(root):
        results[f"component_template:{template}"] = create_component_template(cluster, template, root, force)
    for template in settings_reader.find_index_templates(root):
        results[f"index_template:{template}"] = create_index_template(cluster, template, root, force)
    for template in settings_reader.find_templates(root):
        results[f"template:{template}"] = create_template(cluster, template, root, force)

    for index in settings_reader.find_indices(root):
        settings = settings_reader.read_settings(root, index)
        if settings is None:
            settings = DEFAULT_INDEX_SETTINGS
        results[f"index:{index}"] = create_index_with_settings(cluster, index, settings, force)
        update_outcome = update_settings(cluster, index, root)
        if update_outcome != ProvisionOutcome.SKIPPED:
            results[f"index_settings:{index}"] = update_outcome
        for type_name in settings_reader.find_types(root, index):
            results[f"mapping:{index}/{type_name}"] = create_mapping(cluster, index, type_name, root, force)

    for key, outcome in results.items():
        logger.info(f"{key} -> {outcome.value}")
    return results
