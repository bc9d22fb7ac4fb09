from uuid import UUID
from typing import Optional
from sqlalchemy import Select, select, or_

from src.app.core.domain.models import Client, ClientFilter
from src.shared.database.base_repo import BaseRepository
from src.shared.database.database import Database

from src.app.infrastructure.entities.client_entity import ClientEntity
from src.app.infrastructure.mappers.client_mapper import ClientMapper


def build_list_statement(client_filter: ClientFilter) -> Select:
    """
    Compose the listing query for a set of optional filters.

    Status and type are exact matches; search is a case-insensitive substring
    match on name, email or license number. The three dimensions are ANDed,
    the search columns are ORed. Results are newest first.
    """
    stmt = select(ClientEntity)

    status = client_filter.status_constraint
    if status is not None:
        stmt = stmt.where(ClientEntity.status == status)

    client_type = client_filter.client_type_constraint
    if client_type is not None:
        stmt = stmt.where(ClientEntity.client_type == client_type)

    search = client_filter.search_constraint
    if search is not None:
        # autoescape makes % and _ in the search text match literally
        stmt = stmt.where(
            or_(
                ClientEntity.name.icontains(search, autoescape=True),
                ClientEntity.email.icontains(search, autoescape=True),
                ClientEntity.license_number.icontains(search, autoescape=True),
            )
        )

    return stmt.order_by(ClientEntity.created_at.desc())


class ClientRepository(BaseRepository[ClientEntity, Client]):
    """Repository for Client operations."""

    def __init__(self, db: Database, mapper: ClientMapper):
        super().__init__(db, mapper)

    async def get_by_id(self, client_id: UUID) -> Optional[Client]:
        """Get a client by ID."""
        return await self.find_one(
            select(ClientEntity).where(ClientEntity.id == client_id)
        )

    async def get_by_email(self, email: str) -> Optional[Client]:
        """Get a client by email."""
        return await self.find_one(
            select(ClientEntity).where(ClientEntity.email == email.lower())
        )

    async def list_clients(self, client_filter: ClientFilter | None = None) -> list[Client]:
        """List clients matching the filter, most recently created first."""
        return await self.find_all(build_list_statement(client_filter or ClientFilter()))
