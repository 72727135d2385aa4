from typing import Optional, Set
from urllib.parse import urlparse

import boto3
import requests.utils
from botocore import config
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from requests.models import PreparedRequest

from beyonder.models.client_options import ClientOptions


def contains_one_of(values_to_restrict: Set):
    """
    Builds a cerberus `check_with` rule requiring exactly one of the given keys to be present.
    """
    def one_of(field, value, error):
        found = values_to_restrict.intersection(value.keys())
        if len(found) > 1:
            error(field, f"More than one value is present: {sorted(found)}")
        elif not found:
            error(field, f"No values are present from set: {sorted(values_to_restrict)}")
    return one_of


def create_boto3_client(aws_service_name: str, region: Optional[str] = None,
                        client_options: Optional[ClientOptions] = None):
    client_options = client_options if client_options is not None else ClientOptions()
    client_config = config.Config(user_agent_extra=client_options.user_agent_suffix)
    return boto3.client(aws_service_name, region_name=region, config=client_config)


def append_user_agent_header_for_requests(headers: Optional[dict], user_agent_extra: str) -> dict:
    adjusted_headers = dict(headers) if headers else {}
    if "User-Agent" in adjusted_headers:
        adjusted_headers["User-Agent"] = f"{adjusted_headers['User-Agent']} {user_agent_extra}"
    else:
        adjusted_headers["User-Agent"] = f"{requests.utils.default_user_agent()} {user_agent_extra}"
    return adjusted_headers


class SigV4AuthPlugin(requests.auth.AuthBase):
    """Signs requests with AWS Signature Version 4, for Amazon OpenSearch Service domains."""

    def __init__(self, service, region):
        self.service = service
        self.region = region
        self.credentials = boto3.Session().get_credentials()

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        # Signing headers that requests may rewrite after signing are left out
        excluded_headers = requests.utils.default_headers().keys()

        # The port must not take part in the signature
        r.headers['Host'] = urlparse(r.url).hostname

        filtered_headers = {k: v for k, v in r.headers.items() if k.lower() not in excluded_headers}
        aws_request = AWSRequest(method=r.method, url=r.url, data=r.body, headers=filtered_headers)
        signer = SigV4Auth(self.credentials, self.service, self.region)
        if aws_request.body is not None:
            aws_request.headers['x-amz-content-sha256'] = signer.payload(aws_request)
        signer.add_auth(aws_request)
        r.headers.update(dict(aws_request.headers))
        return r
