"""Turns a managed resource into an authenticated Console API client."""

from __future__ import annotations

from typing import Any, Callable

from kubernetes import client

from ..auth import TokenProvider, get_token_provider
from ..errors import CredentialResolutionError
from ..models import ManagedResource
from ..services.camunda.client import ConsoleClient
from ..utils.credentials import resolve_credentials
from ..utils.kubernetes import get_core_api, get_custom_objects_api, get_provider_config_with_cache


class Connector:
    """Produces a ConsoleClient for a managed resource.

    Connecting only authenticates; no remote resource is touched, so it is
    safe to run on every tick.
    """

    def __init__(
        self,
        custom_api: Any | None = None,
        core_api: Any | None = None,
        token_provider: TokenProvider | None = None,
        resolver: Callable[..., bytes] = resolve_credentials,
        client_factory: Callable[..., ConsoleClient] = ConsoleClient,
    ) -> None:
        self._custom_api = custom_api
        self._core_api = core_api
        self.token_provider = token_provider or get_token_provider()
        self.resolver = resolver
        self.client_factory = client_factory

    @property
    def custom_api(self) -> Any:
        if self._custom_api is None:
            self._custom_api = get_custom_objects_api()
        return self._custom_api

    @property
    def core_api(self) -> Any:
        if self._core_api is None:
            self._core_api = get_core_api()
        return self._core_api

    def resolve(self, provider_config_name: str) -> bytes:
        """Resolve the credential bytes of a ProviderConfig.

        Raises:
            CredentialResolutionError: If the config is missing or its source unreadable
        """
        try:
            provider_config = get_provider_config_with_cache(self.custom_api, provider_config_name)
        except client.exceptions.ApiException as e:
            if e.status == 404:
                raise CredentialResolutionError(
                    f"cannot get ProviderConfig: {provider_config_name} not found", cause=e
                ) from e
            raise CredentialResolutionError(f"cannot get ProviderConfig: {e.reason}", cause=e) from e

        credentials = (provider_config.get("spec") or {}).get("credentials") or {}
        return self.resolver(credentials, self.core_api)

    def connect(self, record: ManagedResource) -> ConsoleClient:
        """Authenticate for ``record`` and return a bound Console client.

        Raises:
            CredentialResolutionError: If the credentials cannot be resolved
            MalformedCredentialsError: If the credentials cannot be parsed
            AuthenticationError: If the token exchange fails
        """
        data = self.resolve(record.provider_config_ref)
        token = self.token_provider.get_or_create(data)
        return self.client_factory(token.access_token, host=token.audience)
