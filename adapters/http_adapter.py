"""
HTTP transport for the ordering API.

Wraps an httpx.Client: joins endpoints onto the base URL, attaches the bearer
token, maps non-2xx responses onto the APIError hierarchy and decodes bodies
into pydantic models.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from app.config import settings
from app.exceptions import (
    APIError,
    DecodingFailedError,
    InvalidResponseError,
    InvalidURLError,
    RequestFailedError,
    ServerError,
    UnauthorizedError,
)
from domain.schemas.auth_schemas import ErrorBody, ImageUpload, TokenPair

logger = logging.getLogger("nidus.http")

UNKNOWN_ERROR = "Unknown error"
UNREADABLE_ERROR = "Failed to process error response"


class TokenStore(Protocol):
    """Where the adapter reads and writes auth tokens"""

    @property
    def access_token(self) -> Optional[str]: ...

    @property
    def refresh_token(self) -> Optional[str]: ...

    def save_tokens(self, access_token: str, refresh_token: str) -> None: ...

    def clear_tokens(self) -> None: ...


class MemoryTokenStore:
    """Token store that lives only as long as the process"""

    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self.access_token = access_token
        self.refresh_token = refresh_token

    def save_tokens(self, access_token: str, refresh_token: str) -> None:
        self.access_token = access_token
        self.refresh_token = refresh_token

    def clear_tokens(self) -> None:
        self.access_token = None
        self.refresh_token = None


def parse_error_message(response: httpx.Response) -> str:
    """Extract the server's message from an error body"""
    try:
        data = response.json()
    except ValueError:
        return UNREADABLE_ERROR
    if not isinstance(data, dict):
        return UNKNOWN_ERROR
    nested = data.get("error")
    if isinstance(nested, dict):
        return nested.get("message") or UNKNOWN_ERROR
    try:
        body = ErrorBody.model_validate(data)
    except ValidationError:
        return UNREADABLE_ERROR
    return body.text or UNKNOWN_ERROR


def _to_body(payload: Any) -> Any:
    if payload is None:
        return {}
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True, mode="json", exclude_none=True)
    return payload


def _clean_params(params: Optional[Mapping[str, Any]]) -> Optional[dict]:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


class HTTPAdapter:
    """
    Synchronous API client.

    Args:
        base_url: API root such as "https://host/api"
        token_store: source of access and refresh tokens
        client: optional httpx.Client to send through (FastAPI's TestClient works too);
            when omitted the adapter owns a client and closes it in close()
        timeout: per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token_store = token_store if token_store is not None else MemoryTokenStore()
        self.timeout = timeout or settings.request_timeout_sec
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self.timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HTTPAdapter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    @property
    def access_token(self) -> Optional[str]:
        return self.token_store.access_token

    @property
    def has_token(self) -> bool:
        return bool(self.token_store.access_token)

    def save_tokens(self, access_token: str, refresh_token: str) -> None:
        self.token_store.save_tokens(access_token, refresh_token)

    def clear_tokens(self) -> None:
        self.token_store.clear_tokens()

    def refresh_auth_token(self) -> bool:
        """Exchange the refresh token for a new pair; clears tokens on failure"""
        refresh_token = self.token_store.refresh_token
        if not refresh_token:
            return False
        try:
            tokens = self.post(
                "/auth/refresh",
                {"refreshToken": refresh_token},
                TokenPair,
                requires_auth=False,
            )
        except APIError as exc:
            logger.warning("Token refresh failed: %s", exc)
            self.clear_tokens()
            return False
        self.save_tokens(tokens.access_token, tokens.refresh_token)
        logger.info("Access token refreshed")
        return True

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    def build_url(self, endpoint: str) -> str:
        if not endpoint.startswith("/"):
            endpoint = "/" + endpoint
        raw = f"{self.base_url}{endpoint}"
        try:
            url = httpx.URL(raw)
        except (httpx.InvalidURL, TypeError) as exc:
            raise InvalidURLError(f"Invalid URL: {raw}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURLError(f"Invalid URL: {raw}")
        return raw

    def _headers(self, requires_auth: bool, json_body: bool = True) -> dict:
        headers = {"Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if requires_auth:
            token = self.token_store.access_token
            if not token:
                raise UnauthorizedError()
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _send(
        self,
        method: str,
        endpoint: str,
        *,
        requires_auth: bool = True,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        files: Optional[dict] = None,
    ) -> httpx.Response:
        url = self.build_url(endpoint)
        headers = self._headers(requires_auth, json_body=files is None)
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(
                method,
                url,
                headers=headers,
                params=_clean_params(params),
                json=json,
                files=files,
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, endpoint, exc)
            raise RequestFailedError(cause=exc) from exc

        logger.debug("%s %s -> %d", method, endpoint, response.status_code)
        if 200 <= response.status_code < 300:
            return response
        if response.status_code == 401:
            logger.warning("%s %s unauthorized", method, endpoint)
            raise UnauthorizedError()
        message = parse_error_message(response)
        logger.warning("%s %s -> %d: %s", method, endpoint, response.status_code, message)
        raise ServerError(response.status_code, message)

    def _decode(self, response: httpx.Response, model: Any) -> Any:
        if model is None:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise DecodingFailedError(cause=exc) from exc
        if not response.content:
            raise InvalidResponseError("Empty response body")
        try:
            data = response.json()
        except ValueError as exc:
            raise DecodingFailedError(cause=exc) from exc
        try:
            if isinstance(model, type) and issubclass(model, BaseModel):
                return model.model_validate(data)
            return TypeAdapter(model).validate_python(data)
        except ValidationError as exc:
            logger.warning("Could not decode %s: %s", getattr(model, "__name__", model), exc)
            raise DecodingFailedError(cause=exc) from exc

    def request(
        self,
        method: str,
        endpoint: str,
        model: Any = None,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        requires_auth: bool = True,
    ) -> Any:
        json_body = _to_body(body) if method in ("POST", "PUT", "PATCH") else None
        response = self._send(
            method, endpoint, requires_auth=requires_auth, params=params, json=json_body
        )
        return self._decode(response, model)

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def fetch(self, endpoint: str, model: Any = None, params: Optional[Mapping[str, Any]] = None, requires_auth: bool = True) -> Any:
        return self.request("GET", endpoint, model, params=params, requires_auth=requires_auth)

    def post(self, endpoint: str, body: Any = None, model: Any = None, params: Optional[Mapping[str, Any]] = None, requires_auth: bool = True) -> Any:
        return self.request("POST", endpoint, model, body=body, params=params, requires_auth=requires_auth)

    def patch(self, endpoint: str, body: Any = None, model: Any = None, params: Optional[Mapping[str, Any]] = None, requires_auth: bool = True) -> Any:
        return self.request("PATCH", endpoint, model, body=body, params=params, requires_auth=requires_auth)

    def put(self, endpoint: str, body: Any = None, model: Any = None, params: Optional[Mapping[str, Any]] = None, requires_auth: bool = True) -> Any:
        return self.request("PUT", endpoint, model, body=body, params=params, requires_auth=requires_auth)

    def delete(self, endpoint: str, model: Any = None, requires_auth: bool = True) -> Any:
        return self.request("DELETE", endpoint, model, requires_auth=requires_auth)

    def delete_without_response(self, endpoint: str, requires_auth: bool = True) -> None:
        self._send("DELETE", endpoint, requires_auth=requires_auth)

    def send_raw(self, method: str, endpoint: str, body: Any = None, params: Optional[Mapping[str, Any]] = None, requires_auth: bool = True) -> httpx.Response:
        """Send a request and return the response without decoding it"""
        json_body = _to_body(body) if method in ("POST", "PUT", "PATCH") else None
        return self._send(method, endpoint, requires_auth=requires_auth, params=params, json=json_body)

    def upload(self, endpoint: str, image: ImageUpload, model: Any = None, field_name: str = "file") -> Any:
        """POST an image as multipart/form-data"""
        files = {field_name: (image.file_name, image.data, image.mime_type)}
        response = self._send("POST", endpoint, files=files)
        return self._decode(response, model)
