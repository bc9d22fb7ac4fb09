"""Domain models used in business logic."""
import uuid
from collections import Counter
from datetime import datetime, UTC
from enum import StrEnum
from typing import Iterable
from uuid import UUID

from pydantic import BaseModel, Field

ALL = "all"


class ClientStatus(StrEnum):
    """Well-known client statuses. Other values are stored as-is."""
    ACTIVE = "active"
    PROSPECT = "prospect"
    ARCHIVED = "archived"


def utc_now() -> datetime:
    return datetime.now(UTC)


class Client(BaseModel):
    """Domain model for Client used in business logic."""
    id: UUID = Field(default_factory=uuid.uuid4, description="Unique client ID")
    name: str = Field(..., min_length=1)
    email: str = Field(..., description="Normalized (lowercase) email, unique")
    phone: str | None = None
    company: str | None = None
    address: str | None = None
    license_number: str | None = None
    client_type: str
    status: str = ClientStatus.PROSPECT
    notes: str | None = None
    created_by: str | None = Field(default=None, description="Identity of the creating user")
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update timestamp")

    model_config = {"from_attributes": True}

    def archive(self) -> None:
        self.status = ClientStatus.ARCHIVED


class ClientFilter(BaseModel):
    """
    Optional listing filters for a single query.

    ``None``, empty strings and the ``"all"`` sentinel all mean "no constraint"
    on that dimension; the properties below expose the effective values.
    """
    search: str | None = None
    status: str | None = None
    client_type: str | None = None

    @staticmethod
    def _constraint(value: str | None) -> str | None:
        if not value or value == ALL:
            return None
        return value

    @property
    def status_constraint(self) -> str | None:
        return self._constraint(self.status)

    @property
    def client_type_constraint(self) -> str | None:
        return self._constraint(self.client_type)

    @property
    def search_constraint(self) -> str | None:
        return self.search or None


class ClientStats(BaseModel):
    """Status counts over the whole client collection."""
    total_clients: int = 0
    active_clients: int = 0
    prospect_clients: int = 0
    archived_clients: int = 0

    @classmethod
    def from_clients(cls, clients: Iterable[Client]) -> "ClientStats":
        clients = list(clients)
        counts = Counter(client.status for client in clients)
        return cls(
            total_clients=len(clients),
            active_clients=counts[ClientStatus.ACTIVE],
            prospect_clients=counts[ClientStatus.PROSPECT],
            archived_clients=counts[ClientStatus.ARCHIVED],
        )


# =============================================================================
# Identity
# =============================================================================

class CallerIdentity(BaseModel):
    """Verified caller returned by the identity provider."""
    id: str
    email: str | None = None
    full_name: str | None = None
    email_confirmed: bool = False

    model_config = {"frozen": True}


class AuthSession(BaseModel):
    """Tokens issued by the identity provider."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    user: CallerIdentity


class SignupResult(BaseModel):
    """Outcome of a signup; the session is absent until the email is confirmed."""
    user: CallerIdentity
    session: AuthSession | None = None
