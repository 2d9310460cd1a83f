"""
HTTP gateway for the storefront backend

Every outgoing call goes through `HttpGateway.request`. It attaches the
bearer credential of the current session and, when the backend answers 401,
refreshes the token pair once and resends the request.
"""

import asyncio
import json
import shlex
from typing import Dict, Optional, Any
from urllib.parse import urlencode

import httpx

from .config import APIConfig
from .errors import (
    AuthExpired,
    AuthInvalid,
    ErrorHandler,
    GENERIC_ERROR_MESSAGE,
    NetworkError,
    NotFound,
    ServerError,
)
from .models.catalog import ApiResponse
from .services.navigation import Navigator
from .services.session_manager import SessionManager
from .utils.logger import get_logger, mask_headers

logger = get_logger(__name__)

REFRESH_ENDPOINT = "/auth/refresh"


class HttpGateway:
    """Single request pipeline for all backend calls"""

    def __init__(
        self,
        session_manager: SessionManager,
        navigator: Optional[Navigator] = None,
        api_config: Optional[APIConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the gateway

        Args:
            session_manager: Owner of the current session and its tokens
            navigator: Receives the forced redirect when re-authentication fails
            api_config: Base URL, timeout and connection limits
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.session_manager = session_manager
        self.navigator = navigator or Navigator()
        self.api_config = api_config or APIConfig(base_url="http://localhost:8080/api")
        self.base_url = self.api_config.base_url.rstrip("/")
        self.debug_curl = self.api_config.debug_curl
        self.transport = transport

        self.timeout = httpx.Timeout(self.api_config.timeout)
        self.limits = httpx.Limits(
            max_keepalive_connections=self.api_config.max_keepalive_connections,
            max_connections=self.api_config.max_connections
        )

        # Shared by every request that hits a 401 while a refresh is running
        self._refresh_task: Optional[asyncio.Task] = None

        logger.info(f"HttpGateway initialized with base_url: {self.base_url}")
        if self.debug_curl:
            logger.info("CURL logging enabled for API calls")

    def _generate_curl_command(self, method: str, url: str, headers: Dict,
                               params: Optional[Dict], json_data: Optional[Any]) -> str:
        """Generate curl command for debugging"""
        curl_parts = ['curl', '-X', method.upper()]

        for key, value in mask_headers(headers).items():
            curl_parts.extend(['-H', shlex.quote(f'{key}: {value}')])

        if json_data is not None:
            curl_parts.extend(['-d', shlex.quote(json.dumps(json_data, separators=(',', ':')))])

        if params:
            url = f"{url}?{urlencode(params)}"

        curl_parts.append(shlex.quote(url))
        return ' '.join(curl_parts)

    async def get(self, endpoint: str, params: Optional[Dict] = None) -> ApiResponse:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, json_data: Optional[Any] = None,
                   files: Optional[Dict] = None) -> ApiResponse:
        return await self.request("POST", endpoint, json_data=json_data, files=files)

    async def put(self, endpoint: str, json_data: Optional[Any] = None) -> ApiResponse:
        return await self.request("PUT", endpoint, json_data=json_data)

    async def delete(self, endpoint: str) -> ApiResponse:
        return await self.request("DELETE", endpoint)

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict] = None,
        json_data: Optional[Any] = None,
        files: Optional[Dict] = None,
        headers: Optional[Dict] = None
    ) -> ApiResponse:
        """
        Send a request to the backend

        A 401 triggers one refresh-and-retry cycle. The retried request is
        never retried again.

        Args:
            method: HTTP method
            endpoint: Path below the API base URL, e.g. /orders
            params: Query parameters
            json_data: JSON body
            files: Multipart files, as accepted by httpx
            headers: Extra headers

        Returns:
            Parsed response envelope

        Raises:
            AuthExpired: 401 that could not be recovered
            AuthInvalid: the refresh failed; the session has been cleared
            NotFound: 404
            ServerError: any other unsuccessful response
            NetworkError: transport failure
        """
        token = self.session_manager.access_token
        response = await self._send(method, endpoint, params, json_data, files, headers, token)

        # At most one retry; a second 401 is surfaced to the caller
        if response.status_code == 401:
            logger.info(f"[Auth] 401 for {method.upper()} {endpoint}, refreshing credentials")
            new_token = await self._recover_from_unauthorized(token, response)
            response = await self._send(method, endpoint, params, json_data, files, headers, new_token)

        return self._handle_response(method, endpoint, response)

    async def _send(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict],
        json_data: Optional[Any],
        files: Optional[Dict],
        headers: Optional[Dict],
        auth_token: Optional[str]
    ) -> httpx.Response:
        """Send one HTTP request; transport failures become NetworkError"""
        url = f"{self.base_url}{endpoint}"

        request_headers = {"Accept": "application/json"}
        if files is None:
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)
        if auth_token:
            request_headers["Authorization"] = f"Bearer {auth_token}"

        if self.debug_curl:
            curl_cmd = self._generate_curl_command(method, url, request_headers, params, json_data)
            logger.info(f"CURL: {curl_cmd}")

        logger.info(f"[REQUEST] {method.upper()} {url}")
        logger.debug(f"[REQUEST] Headers: {mask_headers(request_headers)}")
        if json_data is not None:
            logger.debug(f"[REQUEST] Body: {json.dumps(json_data, default=str)}")
        if params:
            logger.debug(f"[REQUEST] Params: {params}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, limits=self.limits,
                                         transport=self.transport) as client:
                response = await client.request(
                    method=method.upper(),
                    url=url,
                    params=params,
                    json=json_data,
                    files=files,
                    headers=request_headers
                )
        except httpx.TransportError as e:
            logger.error(f"Network/connection error for {endpoint}: {e}. Check backend availability and network connectivity.")
            raise NetworkError(data={"endpoint": endpoint, "reason": str(e)}) from e

        logger.debug(f"{method.upper()} {url} -> {response.status_code}")
        return response

    async def _recover_from_unauthorized(self, failed_token: Optional[str],
                                         response: httpx.Response) -> str:
        """
        Obtain a usable access token after a 401

        Waits on the refresh already in flight when there is one, so
        concurrent failures share a single refresh call.

        Returns:
            Access token to resend the request with
        """
        current = self.session_manager.access_token
        if current is not None and current != failed_token:
            # Another request already rotated the tokens
            return current

        if self._refresh_task is None or self._refresh_task.done():
            refresh_token = self.session_manager.refresh_token
            if not refresh_token:
                message = ErrorHandler.message_from_body(self._safe_json(response))
                logger.warning("[Auth] 401 without a refresh token; nothing to refresh")
                raise AuthExpired(message or "Please log in to continue")
            self._refresh_task = asyncio.ensure_future(self._refresh(refresh_token))
            self._refresh_task.add_done_callback(self._collect_refresh_result)
        else:
            logger.debug("[Auth] Joining refresh already in flight")

        # Shielded so one abandoned caller does not cancel the shared refresh
        return await asyncio.shield(self._refresh_task)

    @staticmethod
    def _collect_refresh_result(task: asyncio.Task) -> None:
        """Retrieve the refresh outcome even when every waiter was cancelled"""
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug(f"[Auth] Refresh task finished with {type(error).__name__}")

    async def _refresh(self, refresh_token: str) -> str:
        """
        Exchange the refresh token for a new token pair

        On any failure the session is cleared and the application is reset
        to its root.
        """
        try:
            response = await self._send("POST", REFRESH_ENDPOINT, None,
                                        {"refreshToken": refresh_token}, None, None, None)
            if not response.is_success:
                raise AuthInvalid(data={"status": response.status_code})

            data = ApiResponse.from_dict(self._safe_json(response)).data or {}
            access_token = data.get("accessToken") if isinstance(data, dict) else None
            new_refresh_token = data.get("refreshToken") if isinstance(data, dict) else None
            if not access_token or not new_refresh_token:
                raise AuthInvalid(data={"reason": "refresh response without tokens"})

            self.session_manager.update_tokens(access_token, new_refresh_token)
            logger.info("[Auth] Token refresh succeeded")
            return access_token
        except (AuthInvalid, NetworkError, RuntimeError) as e:
            logger.error(f"[Auth] Token refresh failed: {e}. Forcing logout.")
            self.session_manager.clear()
            self.navigator.hard_redirect("/")
            if isinstance(e, AuthInvalid):
                raise
            raise AuthInvalid() from e

    def _handle_response(self, method: str, endpoint: str, response: httpx.Response) -> ApiResponse:
        """Unwrap the envelope or raise the matching error"""
        body = self._safe_json(response)
        message = ErrorHandler.message_from_body(body)

        if response.is_success:
            api_response = ApiResponse.from_dict(body)
            if not api_response.success:
                logger.error(f"{method.upper()} {endpoint} reported failure: {api_response.message}")
                raise ServerError(api_response.message or GENERIC_ERROR_MESSAGE, status_code=response.status_code)
            return api_response

        if response.status_code == 401:
            logger.error(f"Unauthorized access to {endpoint} after credential refresh")
            raise AuthExpired(message or "Your session has expired")
        if response.status_code == 404:
            logger.warning(f"HTTP 404 for {endpoint}: {message or response.text[:200]}")
            raise NotFound(message or "Not found")

        logger.error(f"HTTP {response.status_code} for {endpoint}: {message or response.text[:500]}")
        raise ServerError(message or GENERIC_ERROR_MESSAGE, status_code=response.status_code)

    @staticmethod
    def _safe_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None
