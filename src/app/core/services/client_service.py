import logging
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from src.app.core.domain.models import Client, ClientFilter, ClientStats, utc_now
from src.shared.database.errors import is_unique_violation
from src.shared.database.unit_of_work import UnitOfWork
from src.client.schemas import CreateClientRequest, UpdateClientRequest
from src.app.infrastructure.client_repository import ClientRepository
from src.shared.exceptions import EntityNotFound, ConflictingEntityFound

logger = logging.getLogger(__name__)


class ClientService:
    """Service for handling Client business logic."""

    def __init__(self, repository: ClientRepository, unit_of_work: UnitOfWork):
        self.repository = repository
        self.unit_of_work = unit_of_work

    async def list_clients(self, client_filter: ClientFilter | None = None) -> list[Client]:
        """List clients matching the optional filters, newest first."""
        return await self.repository.list_clients(client_filter)

    async def get_stats(self) -> ClientStats:
        """Count clients by status over the unfiltered collection."""
        clients = await self.repository.list_clients(ClientFilter())
        return ClientStats.from_clients(clients)

    async def get_client(self, client_id: UUID) -> Client:
        """Get a client by ID."""
        client = await self.repository.get_by_id(client_id)
        if not client:
            raise EntityNotFound("Client", client_id)
        return client

    async def create_client(self, request: CreateClientRequest, created_by: str) -> Client:
        """Create a new client owned by the calling user."""
        now = utc_now()
        client = Client(
            name=request.name,
            email=request.email,
            phone=request.phone,
            company=request.company,
            address=request.address,
            license_number=request.license_number,
            client_type=request.client_type,
            status=request.status,
            notes=request.notes,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )

        # Database enforces email uniqueness, no pre-check
        await self._persist(client, request.email, new=True)
        logger.info("Created client %s", client.id)
        return client

    async def update_client(self, client_id: UUID, request: UpdateClientRequest) -> Client:
        """Apply the fields present in the request; absent fields are left untouched."""
        client = await self.get_client(client_id)
        changes: dict[str, Any] = request.model_dump(exclude_unset=True)
        if not changes:
            return client

        updated = client.model_copy(update={**changes, "updated_at": utc_now()})
        await self._persist(updated, updated.email, new=False)
        logger.info("Updated client %s fields=%s", client_id, sorted(changes))
        return updated

    async def archive_client(self, client_id: UUID) -> Client:
        """Force the client's status to archived. Archiving twice is a no-op."""
        client = await self.get_client(client_id)
        client.archive()
        client.updated_at = utc_now()
        async with self.unit_of_work:
            await self.unit_of_work.update(client)
        logger.info("Archived client %s", client_id)
        return client

    async def delete_client(self, client_id: UUID) -> None:
        """Delete a client. Raises EntityNotFound for unknown IDs."""
        client = await self.get_client(client_id)
        async with self.unit_of_work:
            await self.unit_of_work.delete(client)
        logger.info("Deleted client %s", client_id)

    async def _persist(self, client: Client, email: str, new: bool) -> None:
        try:
            async with self.unit_of_work:
                if new:
                    self.unit_of_work.add(client)
                else:
                    await self.unit_of_work.update(client)
        except IntegrityError as e:
            if is_unique_violation(e, "email"):
                raise ConflictingEntityFound("Client", "email", email) from e
            raise
