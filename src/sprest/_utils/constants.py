# Environment variables
ENV_BASE_URL = "SPREST_URL"
ENV_ACCESS_TOKEN = "SPREST_ACCESS_TOKEN"
ENV_TIMEOUT = "SPREST_TIMEOUT"

# Headers
HEADER_CLIENT_TAG = "X-ClientService-ClientTag"
HEADER_ACCEPT = "Accept"
HEADER_CONTENT_TYPE = "Content-Type"

ACCEPT_NOMETADATA = "application/json;odata=nometadata"
CONTENT_TYPE_VERBOSE = "application/json;odata=verbose;charset=utf-8"

# Client tag
CLIENT_TAG_PREFIX = "SpRest.Python"

# Aliases
TARGET_ALIAS = "@target"

# Default request timeout in seconds
DEFAULT_TIMEOUT = 30.0
