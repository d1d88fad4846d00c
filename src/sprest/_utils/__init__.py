from ._endpoint import Endpoint, combine, validate_relative_path
from ._logs import setup_logging
from ._odata import (
    body,
    encode_uri_component,
    metadata,
    odata_bool,
    parse_odata_json,
    quoted_literal,
)
from ._query_params import QueryParams
from ._request_spec import RequestSpec
from ._user_agent import client_tag_value, sdk_version

__all__ = [
    "Endpoint",
    "QueryParams",
    "RequestSpec",
    "body",
    "client_tag_value",
    "combine",
    "encode_uri_component",
    "metadata",
    "odata_bool",
    "parse_odata_json",
    "quoted_literal",
    "sdk_version",
    "setup_logging",
    "validate_relative_path",
]
