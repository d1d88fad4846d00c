from typing import List


class BaseUrlMissingError(Exception):
    def __init__(
        self,
        message="Site URL missing. Pass base_url or set the site URL via the SPREST_URL environment variable.",
    ):
        self.message = message
        super().__init__(self.message)


class SecretMissingError(Exception):
    def __init__(
        self,
        message="Authentication required. Pass secret or set the SPREST_ACCESS_TOKEN environment variable to a valid access token.",
    ):
        self.message = message
        super().__init__(self.message)


class ConstructionError(ValueError):
    """Raised when a request builder is given an invalid relative path."""


class SubstitutionError(LookupError):
    """Raised when a url references ``@name`` placeholders with no parameter.

    This only happens when a request is finalized for transmission, never
    while it is being composed.
    """

    def __init__(self, missing: List[str], url: str) -> None:
        self.missing = list(missing)
        self.url = url
        names = ", ".join(self.missing)
        super().__init__(f"No query parameter bound for placeholder(s) {names} in '{url}'")
