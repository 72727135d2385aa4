from typing import Any, Dict, NamedTuple, Optional
from enum import Enum
import json
import logging

import boto3
from cerberus import Validator
import requests
import requests.auth
from requests.auth import HTTPBasicAuth
from beyonder.models.client_options import ClientOptions
from beyonder.models.utils import (SigV4AuthPlugin, append_user_agent_header_for_requests, contains_one_of,
                                   create_boto3_client)

requests.packages.urllib3.disable_warnings()  # ignore: type

logger = logging.getLogger(__name__)

AuthMethod = Enum("AuthMethod", ["NO_AUTH", "BASIC_AUTH", "SIGV4"])
HttpMethod = Enum("HttpMethod", ["GET", "PUT", "DELETE"])


NO_AUTH_SCHEMA = {
    "nullable": True,
}


def validate_basic_auth_options(field, value, error):
    username = value.get("username")
    password = value.get("password")
    user_secret_arn = value.get("user_secret_arn")

    has_user_pass = username is not None and password is not None
    has_user_secret = user_secret_arn is not None

    if has_user_pass and has_user_secret:
        error(field, "Cannot provide both (username + password) and user_secret_arn")
    elif has_user_pass and (username == "" or password == ""):
        error(field, "Both username and password must be non-empty")
    elif not has_user_pass and not has_user_secret:
        error(field, "Must provide either (username + password) or user_secret_arn")


BASIC_AUTH_SCHEMA = {
    "type": "dict",
    "schema": {
        "username": {"type": "string", "required": False},
        "password": {"type": "string", "required": False},
        "user_secret_arn": {"type": "string", "required": False},
    },
    "check_with": validate_basic_auth_options
}

SIGV4_SCHEMA = {
    "nullable": True,
    "type": "dict",
    "schema": {
        "region": {"type": "string", "required": False},
        "service": {"type": "string", "required": False}
    }
}

SCHEMA = {
    "cluster": {
        "type": "dict",
        "schema": {
            "endpoint": {"type": "string", "required": True, "empty": False},
            "allow_insecure": {"type": "boolean", "required": False},
            "timeout": {"type": "number", "required": False, "min": 0},
            "no_auth": NO_AUTH_SCHEMA,
            "basic_auth": BASIC_AUTH_SCHEMA,
            "sigv4": SIGV4_SCHEMA
        },
        "check_with": contains_one_of({auth.name.lower() for auth in AuthMethod})
    }
}


class AuthDetails(NamedTuple):
    username: str
    password: str


class Cluster:
    """
    The Elasticsearch or OpenSearch cluster that definitions are provisioned into.

    This is the only component that talks HTTP. Authentication, TLS verification and timeouts
    are all settled here, so callers only deal in paths, bodies and status codes.
    """

    config: Dict
    endpoint: str = ""
    timeout: Optional[float] = None
    auth_type: Optional[AuthMethod] = None
    auth_details: Optional[Dict[str, Any]] = None
    allow_insecure: bool = False
    client_options: ClientOptions

    def __init__(self, config: Dict, client_options: Optional[ClientOptions] = None) -> None:
        logger.info(f"Initializing cluster with config: {config}")
        v = Validator(SCHEMA)
        if not v.validate({'cluster': config}):
            raise ValueError("Invalid config file for cluster", v.errors)

        self.config = config
        self.endpoint = config["endpoint"].rstrip("/")
        self.timeout = config.get("timeout", None)
        self.allow_insecure = config.get("allow_insecure", False) if self.endpoint.startswith(
            "https") else config.get("allow_insecure", True)
        if 'no_auth' in config:
            self.auth_type = AuthMethod.NO_AUTH
        elif 'basic_auth' in config:
            self.auth_type = AuthMethod.BASIC_AUTH
            self.auth_details = config["basic_auth"]
        elif 'sigv4' in config:
            self.auth_type = AuthMethod.SIGV4
            self.auth_details = config["sigv4"] if config["sigv4"] is not None else {}
        self.client_options = client_options if client_options is not None else ClientOptions()

    def __repr__(self) -> str:
        return f"Cluster(endpoint={self.endpoint!r}, auth_type={self.auth_type})"

    def get_basic_auth_details(self) -> AuthDetails:
        """Return a tuple of (username, password) for basic auth. Will use username/password if provided in plaintext,
        otherwise will pull both username/password as keys in the specified secrets manager secret.
        """
        assert self.auth_type == AuthMethod.BASIC_AUTH
        assert self.auth_details is not None  # for mypy's sake
        if "username" in self.auth_details and "password" in self.auth_details:
            return AuthDetails(username=self.auth_details["username"], password=self.auth_details["password"])
        assert "user_secret_arn" in self.auth_details  # for mypy's sake
        client = create_boto3_client(aws_service_name="secretsmanager", client_options=self.client_options)
        secret_response = client.get_secret_value(SecretId=self.auth_details["user_secret_arn"])
        try:
            secret_dict = json.loads(secret_response["SecretString"])
        except json.JSONDecodeError:
            raise ValueError(f"Expected secret {self.auth_details['user_secret_arn']} to be a JSON object with username"
                             f" and password fields")

        missing_keys = [k for k in ("username", "password") if k not in secret_dict]
        if missing_keys:
            raise ValueError(
                f"Secret {self.auth_details['user_secret_arn']} is missing required key(s): {', '.join(missing_keys)}"
            )

        return AuthDetails(username=secret_dict["username"], password=secret_dict["password"])

    def _get_sigv4_details(self, force_region=False) -> tuple[str, Optional[str]]:
        """Return the service signing name and region name. If force_region is true,
        it will instantiate a boto3 session to guarantee that the region is not None.
        """
        assert self.auth_type == AuthMethod.SIGV4
        if force_region and 'region' not in self.auth_details:
            session = boto3.session.Session()
            return self.auth_details.get("service", "es"), self.auth_details.get("region", session.region_name)
        return self.auth_details.get("service", "es"), self.auth_details.get("region", None)

    def _generate_auth_object(self) -> requests.auth.AuthBase | None:
        if self.auth_type == AuthMethod.BASIC_AUTH:
            auth_details = self.get_basic_auth_details()
            return HTTPBasicAuth(auth_details.username, auth_details.password)
        elif self.auth_type == AuthMethod.SIGV4:
            service_name, region_name = self._get_sigv4_details(force_region=True)
            return SigV4AuthPlugin(service_name, region_name)
        elif self.auth_type is AuthMethod.NO_AUTH:
            return None
        raise NotImplementedError(f"Auth type {self.auth_type} not implemented")

    def call_api(self, path, method: HttpMethod = HttpMethod.GET, data=None, headers=None,
                 timeout=None, session=None, raise_error=True, **kwargs) -> requests.Response:
        """
        Calls an API on the cluster.

        Connection failures and timeouts are raised as `requests.exceptions.RequestException`
        subclasses. HTTP error statuses only raise when `raise_error` is set.
        """
        if session is None:
            session = requests.Session()

        auth = self._generate_auth_object()

        request_headers = append_user_agent_header_for_requests(
            headers=headers, user_agent_extra=self.client_options.user_agent_suffix)

        r = session.request(
            method.name,
            f"{self.endpoint}{path}",
            verify=(not self.allow_insecure),
            params=kwargs.get('params', {}),
            auth=auth,
            data=data,
            headers=request_headers,
            timeout=timeout if timeout is not None else self.timeout
        )
        logger.info(f"call_api request {method.name} {self.endpoint}{path}, response: {r.status_code} {r.text[:1000]}")
        if raise_error:
            r.raise_for_status()
        return r
