"""
How Beyonder identifies itself to the cluster and to AWS.

Every request carries a `beyonder/<version>` product token in its User-Agent, followed by the
`user_agent_extra` configured under `client_options`, so that cluster audit logs can tell
provisioning calls apart from application traffic.
"""
from typing import Dict, Optional
import logging

from cerberus import Validator

logger = logging.getLogger(__name__)

BEYONDER_VERSION = "1.0.0"
USER_AGENT_PRODUCT = f"beyonder/{BEYONDER_VERSION}"

SCHEMA = {
    "user_agent_extra": {"type": "string", "required": False, "empty": False},
}


class ClientOptions:
    user_agent_extra: Optional[str] = None

    def __init__(self, config: Optional[Dict] = None) -> None:
        config = config if config is not None else {}
        v = Validator(SCHEMA)
        if not isinstance(config, dict) or not v.validate(config):
            raise ValueError("Invalid config file for client_options", v.errors)
        self.user_agent_extra = config.get("user_agent_extra")

    @property
    def user_agent_suffix(self) -> str:
        """Appended to the User-Agent of the requests and boto3 clients."""
        if self.user_agent_extra:
            return f"{USER_AGENT_PRODUCT} {self.user_agent_extra}"
        return USER_AGENT_PRODUCT
