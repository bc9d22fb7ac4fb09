"""HTTP client for consuming the icangrow API."""
from uuid import UUID
from typing import Any, Optional
from httpx import AsyncClient, Response

from src.client.schemas import (
    ClientResponse,
    ClientStatsResponse,
    CreateClientRequest,
    LoginRequest,
    SessionResponse,
    UpdateClientRequest,
)


class IcanGrowClient:
    """HTTP client for interacting with the icangrow API."""

    def __init__(
        self,
        base_url: str,
        client: Optional[AsyncClient] = None,
        access_token: str | None = None,
        api_prefix: str = "/api/v1",
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API (e.g., "http://localhost:8000")
            client: Optional httpx.AsyncClient instance. If not provided, a new one will be created.
            access_token: Bearer token sent with every request, see ``login``
            api_prefix: Versioned route prefix
        """
        self.base_url = base_url.rstrip("/")
        self.api_prefix = api_prefix
        self.access_token = access_token
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager entry."""
        if self._owns_client:
            self._client = AsyncClient(base_url=self.base_url)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._owns_client and self._client:
            await self._client.aclose()

    @property
    def client(self) -> AsyncClient:
        """Get the underlying httpx client."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._client

    def _headers(self) -> dict[str, str]:
        if self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        return {}

    async def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Send a request and unwrap the ``data`` member of the success envelope.

        Raises:
            httpx.HTTPStatusError: If the API answers with an error status
        """
        response: Response = await self.client.request(
            method, f"{self.api_prefix}{path}", headers=self._headers(), **kwargs
        )
        response.raise_for_status()
        return response.json().get("data")

    async def login(self, request: LoginRequest) -> SessionResponse:
        """Log in and keep the access token for subsequent calls."""
        data = await self._send("POST", "/auth/login", json=request.model_dump(mode="json", by_alias=True))
        session = SessionResponse(**data)
        self.access_token = session.access_token
        return session

    async def list_clients(
        self,
        search: str | None = None,
        status: str | None = None,
        client_type: str | None = None,
    ) -> list[ClientResponse]:
        """
        List clients, newest first.

        Args:
            search: Substring matched against name, email and license number
            status: Exact status, or "all"
            client_type: Exact client type, or "all"
        """
        params = {
            key: value
            for key, value in {"search": search, "status": status, "type": client_type}.items()
            if value is not None
        }
        data = await self._send("GET", "/clients", params=params)
        return [ClientResponse(**item) for item in data]

    async def get_stats(self) -> ClientStatsResponse:
        return ClientStatsResponse(**await self._send("GET", "/clients/stats"))

    async def get_client(self, client_id: UUID) -> ClientResponse:
        return ClientResponse(**await self._send("GET", f"/clients/{client_id}"))

    async def create_client(self, request: CreateClientRequest) -> ClientResponse:
        data = await self._send("POST", "/clients", json=request.model_dump(mode="json"))
        return ClientResponse(**data)

    async def update_client(self, client_id: UUID, request: UpdateClientRequest) -> ClientResponse:
        """Send only the fields that were set on the request."""
        data = await self._send(
            "PATCH",
            f"/clients/{client_id}",
            json=request.model_dump(mode="json", exclude_unset=True),
        )
        return ClientResponse(**data)

    async def archive_client(self, client_id: UUID) -> None:
        await self._send("PATCH", f"/clients/{client_id}/archive")

    async def delete_client(self, client_id: UUID) -> None:
        await self._send("DELETE", f"/clients/{client_id}")
