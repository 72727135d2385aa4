"""
Idempotent reconcile of one named remote resource against a local JSON definition.

Every kind goes through the same sequence: check existence with a GET, delete when forced,
then create with a PUT when absent. Paths come from the `RESOURCE_PATHS` table.

Forced recreation is not atomic: between the DELETE and the PUT the resource is briefly
absent, and two callers forcing the same resource race with the last PUT winning.
"""
import logging
from typing import Optional

import requests

from beyonder.models.cluster import Cluster, HttpMethod
from beyonder.models.resource import (ExistenceState, ProvisionOutcome, ResourceKind, describe, is_deletable,
                                      resource_path)

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class ProvisioningError(Exception):
    pass


class UnexpectedStatusError(ProvisioningError):
    def __init__(self, action: str, kind: ResourceKind, name: str, response: requests.Response,
                 secondary: Optional[str] = None):
        self.kind = kind
        self.name = name
        self.secondary = secondary
        self.status_code = response.status_code
        self.body = response.text
        super().__init__(f"Could not {action} {describe(kind, name, secondary)}: "
                         f"status {self.status_code} {self.body[:500]}")


def _validate_names(kind: ResourceKind, name: str, secondary: Optional[str] = None) -> None:
    if not name:
        raise ValueError(f"A {kind.value} name must not be empty")
    if secondary is not None and not secondary:
        raise ValueError(f"A {kind.value} secondary name must not be empty")


def _has_mapping(response: requests.Response) -> bool:
    # A typeless index answers `{"idx": {"mappings": {}}}` before any mapping is put
    try:
        body = response.json()
    except ValueError:
        return bool(response.text)
    if not isinstance(body, dict):
        return bool(body)
    return any(isinstance(v, dict) and v.get("mappings") for v in body.values())


def check_exists(cluster: Cluster, kind: ResourceKind, name: str,
                 secondary: Optional[str] = None) -> ExistenceState:
    _validate_names(kind, name, secondary)
    path = resource_path(kind, name, secondary)
    r = cluster.call_api(path, HttpMethod.GET, raise_error=False)
    if r.status_code == 404:
        return ExistenceState.ABSENT
    if r.status_code != 200:
        raise UnexpectedStatusError("check existence of", kind, name, r, secondary)
    if kind == ResourceKind.MAPPING and not _has_mapping(r):
        return ExistenceState.ABSENT
    return ExistenceState.EXISTS


def create(cluster: Cluster, kind: ResourceKind, name: str, definition: str,
           secondary: Optional[str] = None) -> None:
    logger.debug(f"create({describe(kind, name, secondary)})")
    path = resource_path(kind, name, secondary)
    r = cluster.call_api(path, HttpMethod.PUT, data=definition.encode("utf-8"), headers=JSON_HEADERS,
                         raise_error=False)
    if r.status_code != 200:
        logger.warning(f"Could not create {describe(kind, name, secondary)}")
        raise UnexpectedStatusError("create", kind, name, r, secondary)


def remove(cluster: Cluster, kind: ResourceKind, name: str, secondary: Optional[str] = None) -> None:
    """Delete a resource. A resource that is already gone is not an error."""
    if not is_deletable(kind):
        raise ProvisioningError(f"{describe(kind, name, secondary)} cannot be deleted")
    _validate_names(kind, name, secondary)
    logger.debug(f"remove({describe(kind, name, secondary)})")
    r = cluster.call_api(resource_path(kind, name, secondary), HttpMethod.DELETE, raise_error=False)
    if r.status_code == 404:
        logger.debug(f"{describe(kind, name, secondary)} was already absent")
        return
    if r.status_code != 200:
        raise UnexpectedStatusError("delete", kind, name, r, secondary)


def provision(cluster: Cluster, kind: ResourceKind, name: str, definition: str, force: bool = False,
              secondary: Optional[str] = None) -> ProvisionOutcome:
    """
    Make sure the resource exists on the cluster, creating it from `definition` when absent.

    With `force`, an existing resource is deleted and created again. Kinds that cannot be deleted
    (type mappings) have the definition put over the existing one instead, which the cluster merges.
    Transport errors propagate unchanged.
    """
    _validate_names(kind, name, secondary)
    if not definition:
        raise ValueError(f"Empty definition for {describe(kind, name, secondary)}")
    label = describe(kind, name, secondary)
    state = check_exists(cluster, kind, name, secondary)
    recreated = False

    if state == ExistenceState.EXISTS:
        if not force:
            logger.debug(f"{label} already exists.")
            return ProvisionOutcome.UNCHANGED
        if not is_deletable(kind):
            logger.debug(f"{label} already exists. Force is set. Updating it in place.")
            create(cluster, kind, name, definition, secondary)
            return ProvisionOutcome.UPDATED
        logger.debug(f"{label} already exists. Force is set. Removing it.")
        remove(cluster, kind, name, secondary)
        recreated = True

    logger.debug(f"{label} doesn't exist. Creating it.")
    create(cluster, kind, name, definition, secondary)
    return ProvisionOutcome.RECREATED if recreated else ProvisionOutcome.CREATED
