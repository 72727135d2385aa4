from dataclasses import dataclass
from typing import Optional
import logging

from beyonder.models.cluster import Cluster

logger = logging.getLogger(__name__)


@dataclass
class ConnectionResult:
    connection_message: str
    connection_established: bool
    cluster_version: Optional[str]


def connection_check(cluster: Cluster) -> ConnectionResult:
    try:
        r = cluster.call_api("/", timeout=3)
        version = r.json()['version']['number']
    except Exception as e:
        logger.debug(f"Unable to access cluster: {cluster} with exception: {e}")
        return ConnectionResult(connection_message=f"Unable to connect to cluster with error: {e}",
                                connection_established=False,
                                cluster_version=None)
    return ConnectionResult(connection_message="Successfully connected!",
                            connection_established=True,
                            cluster_version=version)
