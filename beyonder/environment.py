import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from cerberus import Validator

from beyonder.models.client_options import ClientOptions
from beyonder.models.cluster import Cluster
from beyonder.models.settings_reader import DEFAULT_ROOT

logger = logging.getLogger(__name__)


SCHEMA = {
    "cluster": {"type": "dict", "required": True},
    "client_options": {"type": "dict", "required": False},
    "beyonder": {
        "type": "dict",
        "required": False,
        "schema": {
            "root": {"type": "string", "required": False, "empty": False},
            "force": {"type": "boolean", "required": False},
        }
    },
}


class Environment:
    cluster: Cluster
    client_options: Optional[ClientOptions] = None
    root: str = DEFAULT_ROOT
    force: bool = False
    config: Dict

    def __init__(self, config: Optional[Dict] = None, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize the environment either from a configuration file or a direct configuration object.

        :param config: Direct configuration object (overrides config_file).
        :param config_file: Path to the YAML config file.
        """
        if isinstance(config, Dict):
            self.config = config
            logger.info(f"Using provided config: {self.config}")
        elif config_file:
            logger.info(f"Loading config file: {config_file}")
            with open(config_file) as f:
                self.config = yaml.safe_load(f)
            logger.info(f"Loaded config file: {self.config}")
        else:
            raise ValueError("Either config or config_file must be provided.")

        v = Validator(SCHEMA)
        if not isinstance(self.config, Dict) or not v.validate(self.config):
            errors = v.errors if isinstance(self.config, Dict) else "config must be a mapping"
            logger.error(f"Config file validation errors: {errors}")
            raise ValueError("Invalid config file", errors)

        if 'client_options' in self.config:
            self.client_options = ClientOptions(self.config["client_options"])

        self.cluster = Cluster(config=self.config["cluster"], client_options=self.client_options)
        logger.info(f"Cluster initialized: {self.cluster.endpoint}")

        beyonder_config = self.config.get("beyonder", {})
        self.root = beyonder_config.get("root", DEFAULT_ROOT)
        self.force = beyonder_config.get("force", False)
