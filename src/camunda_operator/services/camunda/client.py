"""Camunda Console API client implementation."""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import httpx

from ... import metrics
from ...errors import RemoteAPIError, RemoteNotFoundError
from ...utils.errors import sanitize_error_message
from ...utils.rate_limit import rate_limit_console
from .models import ClientInfo, ClusterInfo, CreateClusterRequest, CreatedClient

logger = logging.getLogger(__name__)

_API_TIMEOUT_SECONDS = float(os.getenv("CAMUNDA_API_TIMEOUT_SECONDS", "30"))


class ConsoleClient:
    """Bearer-authenticated handle on the Console customer API.

    Holds nothing but the token and the HTTP connection pool; retries are left
    to the caller.
    """

    def __init__(
        self,
        access_token: str,
        host: str,
        scheme: str = "https",
        timeout: float = _API_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Console client.

        Args:
            access_token: OAuth access token for the API audience
            host: API host (the token audience, e.g. api.cloud.camunda.io)
            scheme: URL scheme
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.host = host
        self.access_token = access_token
        self._client = httpx.Client(
            base_url=f"{scheme}://{host}",
            timeout=httpx.Timeout(timeout),
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
            transport=transport,
        )

    def __enter__(self) -> ConsoleClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        start_time = time.time()
        try:
            response = rate_limit_console(self._client.request)(method, path, json=json)
        except httpx.HTTPError as e:
            metrics.api_call_total.labels(api_type="console", operation=operation, result="error").inc()
            message = sanitize_error_message(str(e))
            logger.error(f"Console {operation} failed: {message}")
            raise RemoteAPIError(f"{operation} failed: {message}", cause=e) from e
        finally:
            metrics.api_call_duration_seconds.labels(api_type="console", operation=operation).observe(
                time.time() - start_time
            )

        if response.status_code == 404:
            metrics.api_call_total.labels(api_type="console", operation=operation, result="not_found").inc()
            raise RemoteNotFoundError(f"{operation}: not found", status_code=404, body=response.text)

        if response.is_error:
            metrics.api_call_total.labels(api_type="console", operation=operation, result="error").inc()
            body = sanitize_error_message(response.text)
            logger.error(f"Console {operation} returned {response.status_code}: {body}")
            raise RemoteAPIError(
                f"{operation} failed with status {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )

        metrics.api_call_total.labels(api_type="console", operation=operation, result="success").inc()
        return response

    def _json(self, operation: str, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteAPIError(f"{operation}: response is not JSON", status_code=response.status_code) from e
        if not isinstance(data, dict):
            raise RemoteAPIError(f"{operation}: unexpected response shape", status_code=response.status_code)
        return data

    def get_cluster(self, cluster_id: str) -> ClusterInfo:
        """Get a cluster by id."""
        response = self._request("get_cluster", "GET", f"/clusters/{cluster_id}")
        return ClusterInfo.from_dict(self._json("get_cluster", response))

    def create_cluster(self, request: CreateClusterRequest) -> str:
        """Create a cluster and return the id assigned by the Console."""
        response = self._request("create_cluster", "POST", "/clusters", json=request.to_dict())
        cluster_id = self._json("create_cluster", response).get("clusterId")
        if not cluster_id:
            raise RemoteAPIError("create_cluster: response has no clusterId", status_code=response.status_code)
        return cluster_id

    def delete_cluster(self, cluster_id: str) -> None:
        """Delete a cluster."""
        self._request("delete_cluster", "DELETE", f"/clusters/{cluster_id}")

    def get_client(self, cluster_id: str, client_id: str) -> ClientInfo:
        """Get an API client of a cluster."""
        response = self._request("get_client", "GET", f"/clusters/{cluster_id}/clients/{client_id}")
        return ClientInfo.from_dict(self._json("get_client", response))

    def create_client(self, cluster_id: str, name: str) -> CreatedClient:
        """Create an API client on a cluster."""
        response = self._request(
            "create_client", "POST", f"/clusters/{cluster_id}/clients", json={"clientName": name}
        )
        data = self._json("create_client", response)
        if not data.get("clientId"):
            raise RemoteAPIError("create_client: response has no clientId", status_code=response.status_code)
        return CreatedClient(client_id=data["clientId"], client_secret=data.get("clientSecret") or "")

    def delete_client(self, cluster_id: str, client_id: str) -> None:
        """Delete an API client of a cluster."""
        self._request("delete_client", "DELETE", f"/clusters/{cluster_id}/clients/{client_id}")
