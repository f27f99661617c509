"""Async HTTP client for the captured-mail backend.

Wraps httpx.AsyncClient and maps every failure onto the catchview error
taxonomy, so callers only ever see CatchViewError subclasses:

- BackendConnectionError / NetworkTimeoutError for transport failures
- NotFoundError / APIError for non-success status codes
- MalformedResponseError for bodies that are not the expected JSON

Usage Examples
--------------

    >>> async with MailboxClient("http://localhost:8025") as client:
    ...     summaries = await client.list_messages()
    ...     detail = await client.get_message(summaries[0].id)
    ...     await client.clear_messages()
"""

from typing import Any, List, Literal, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from catchview.utils.errors import (
    APIError,
    BackendConnectionError,
    MalformedResponseError,
    NetworkTimeoutError,
    NotFoundError,
)
from catchview.utils.logging import async_log_call, get_logger

from .models import MessageDetail, MessageSummary

logger = get_logger(__name__)

HttpMethod = Literal["GET", "POST"]

EMAILS_PATH = "/api/emails"
CLEAR_PATH = "/api/clear"

_SUMMARY_LIST = TypeAdapter(List[MessageSummary])


def _raise_for_status(response: httpx.Response) -> None:
    """Raise an APIError subclass for any non-2xx response."""
    if response.is_success:
        return

    text = response.text.strip()
    message = text or f"HTTP {response.status_code} error"
    details = {"method": response.request.method, "url": str(response.request.url)}

    if response.status_code == 404:
        raise NotFoundError(message, status_code=404, details=details)
    raise APIError(message, status_code=response.status_code, details=details)


class MailboxClient:
    """Client for the mail backend's list, detail and clear endpoints.

    Attributes:
        base_url: The backend root, e.g. ``http://localhost:8025``.
        timeout: Request timeout in seconds, or None to wait indefinitely.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "MailboxClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _request(self, method: HttpMethod, path: str) -> httpx.Response:
        url = f"{self.base_url}{path}"

        try:
            response = await self._client.request(method, path)
        except httpx.TimeoutException as e:
            raise NetworkTimeoutError(
                f"Request to {url} timed out", details={"url": url}
            ) from e
        except httpx.DecodingError as e:
            raise MalformedResponseError(
                f"Response from {url} could not be decoded: {e}", details={"url": url}
            ) from e
        except httpx.TransportError as e:
            raise BackendConnectionError(
                f"Failed to connect to {url}: {e}", details={"url": url}
            ) from e
        except httpx.RequestError as e:
            # Redirect loops and anything else httpx adds later
            raise BackendConnectionError(
                f"Request to {url} failed: {e}", details={"url": url}
            ) from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        _raise_for_status(response)
        return response

    async def _get_json(self, path: str) -> Any:
        response = await self._request("GET", path)
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Response from {path} is not valid JSON",
                details={"path": path, "body": response.text[:200]},
            ) from e

    @async_log_call
    async def list_messages(self) -> List[MessageSummary]:
        """Fetch the summary collection, in the order the backend returns it."""
        payload = await self._get_json(EMAILS_PATH)
        if payload is None:
            return []

        try:
            return _SUMMARY_LIST.validate_python(payload)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Unexpected message list format: {e.error_count()} error(s)",
                details={"path": EMAILS_PATH, "errors": e.errors(include_url=False)},
            ) from e

    @async_log_call
    async def get_message(self, message_id: str) -> MessageDetail:
        """Fetch the full content of one message."""
        path = f"{EMAILS_PATH}/{quote(str(message_id), safe='')}"
        payload = await self._get_json(path)

        try:
            detail = MessageDetail.model_validate(payload)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Unexpected message format for {message_id}: {e.error_count()} error(s)",
                details={"path": path, "errors": e.errors(include_url=False)},
            ) from e

        if detail.id is None:
            detail = detail.model_copy(update={"id": str(message_id)})
        return detail

    @async_log_call
    async def clear_messages(self) -> None:
        """Delete every captured message on the backend."""
        await self._request("POST", CLEAR_PATH)
