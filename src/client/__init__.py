"""HTTP client and wire schemas for the icangrow API."""
from src.client.api_client import IcanGrowClient
from src.client.schemas import (
    ClientResponse,
    ClientStatsResponse,
    CreateClientRequest,
    LoginRequest,
    SessionResponse,
    SignupRequest,
    UpdateClientRequest,
)

__all__ = [
    "IcanGrowClient",
    "ClientResponse",
    "ClientStatsResponse",
    "CreateClientRequest",
    "LoginRequest",
    "SessionResponse",
    "SignupRequest",
    "UpdateClientRequest",
]
