import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from ..domain.models import Credentials, QueryError, QueryResult
from ..exceptions import ClientConstructionError

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"


class RestStoreClient:
    """
    Client bound to one endpoint/key pair. Store errors are returned inside
    the QueryResult; only construction problems raise.
    """

    # PostgREST relays Postgres wording, covered by the default phrases
    absent_phrases = ()

    def __init__(
        self,
        credentials: Credentials,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            credentials: endpoint (https://<ref>.supabase.co) and anon key.
            timeout:     per-request timeout in seconds.
            transport:   optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        endpoint = credentials.endpoint.strip().rstrip("/")
        parsed = urlparse(endpoint)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ClientConstructionError(f"Invalid endpoint URL: {credentials.endpoint!r}")

        self.base_url = endpoint + REST_PREFIX
        headers = {
            "apikey": credentials.access_key,
            "Authorization": f"Bearer {credentials.access_key}",
            "Accept": "application/json",
        }
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def query(self, resource: str, projection: str = "*", limit: int = 1) -> QueryResult:
        params = {"select": projection, "limit": str(limit)}
        try:
            response = self._client.get(f"/{resource}", params=params)
        except httpx.TransportError as e:
            logger.debug("Transport failure querying %s: %r", resource, e)
            return QueryResult(
                resource=resource,
                error=QueryError(message=str(e) or type(e).__name__, transport=True),
            )

        if response.is_error:
            return QueryResult(resource=resource, error=_error_from_response(response))

        try:
            data = response.json()
        except ValueError as e:
            return QueryResult(
                resource=resource,
                error=QueryError(
                    message=f"Response is not valid JSON: {e}",
                    status_code=response.status_code,
                ),
            )

        rows = data if isinstance(data, list) else [data]
        return QueryResult(resource=resource, rows=rows)

    def close(self) -> None:
        self._client.close()


def _error_from_response(response: httpx.Response) -> QueryError:
    """Builds a QueryError from a PostgREST error body ({message, code, details, hint})."""
    body = None
    try:
        body = response.json()
    except ValueError:
        pass

    if isinstance(body, dict) and body.get("message"):
        return QueryError(
            message=str(body["message"]),
            code=_as_text(body.get("code")),
            status_code=response.status_code,
            details=_as_text(body.get("details")),
            hint=_as_text(body.get("hint")),
        )

    text = response.text.strip()
    return QueryError(
        message=text or f"HTTP {response.status_code}: {response.reason_phrase}",
        status_code=response.status_code,
    )


def _as_text(value) -> Optional[str]:
    return None if value is None else str(value)
