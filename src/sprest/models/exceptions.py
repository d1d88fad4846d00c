import json
from typing import Any, Optional

from httpx import HTTPStatusError, ResponseNotRead


class EnrichedException(HTTPStatusError):
    """HTTP error carrying the SharePoint error payload.

    SharePoint reports failures as ``{"odata.error": {"code": ..., "message":
    {"value": ...}}}`` (or under ``error`` in verbose mode); the message is
    surfaced so it shows up in tracebacks instead of just the status line.
    """

    def __init__(self, error: HTTPStatusError) -> None:
        self.status_code = error.response.status_code
        self.url = str(error.request.url)
        self.http_method = error.request.method
        self.response_content = self._read_content(error)
        self.error_code, self.error_message = self._parse_odata_error(
            self.response_content
        )

        summary = (
            f"\nRequest URL: {self.url}"
            f"\nHTTP Method: {self.http_method}"
            f"\nStatus Code: {self.status_code}"
        )
        if self.error_message:
            summary += f"\nMessage: {self.error_message}"
        elif self.response_content:
            summary += f"\nResponse Content: {self.response_content[:500]}"

        super().__init__(
            message=summary, request=error.request, response=error.response
        )

    @staticmethod
    def _read_content(error: HTTPStatusError) -> str:
        try:
            return error.response.text
        except ResponseNotRead:
            return ""

    @staticmethod
    def _parse_odata_error(content: str) -> tuple[Optional[str], Optional[str]]:
        try:
            payload: Any = json.loads(content)
        except (TypeError, ValueError):
            return None, None

        if not isinstance(payload, dict):
            return None, None

        error = payload.get("odata.error") or payload.get("error")
        if not isinstance(error, dict):
            return None, None

        message = error.get("message")
        if isinstance(message, dict):
            message = message.get("value")

        return error.get("code"), message
