from typing import Annotated
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query, status

from src.app.api.dependencies import authenticate
from src.app.api.error_handlers import ApiError
from src.app.api.mappers import to_client_response, to_stats_response
from src.app.api.validation import validate_body
from src.app.containers import Container
from src.app.core.domain.models import CallerIdentity, ClientFilter
from src.app.core.services.client_service import ClientService
from src.client.schemas import (
    ClientListQuery,
    ClientResponse,
    ClientStatsResponse,
    CreateClientRequest,
    DataMessageResponse,
    DataResponse,
    MessageResponse,
    UpdateClientRequest,
)
from src.shared.exceptions import EntityNotFound, ConflictingEntityFound
from src.app.logging import get_logger

router = APIRouter(prefix="/clients", tags=["clients"], dependencies=[Depends(authenticate)])
logger = get_logger(__name__)

EMAIL_CONFLICT_MESSAGE = "A client with this email already exists"


def not_found(e: EntityNotFound) -> ApiError:
    logger.warning(f"Client not found: {e}")
    return ApiError(status.HTTP_404_NOT_FOUND, "Client not found")


def email_conflict(e: ConflictingEntityFound) -> ApiError:
    logger.warning(f"Client email conflict: {e}")
    return ApiError(status.HTTP_409_CONFLICT, EMAIL_CONFLICT_MESSAGE)


@router.get("", response_model=DataResponse[list[ClientResponse]])
@inject
async def list_clients(
    query: Annotated[ClientListQuery, Query()],
    service: ClientService = Depends(Provide[Container.client_service]),
) -> DataResponse[list[ClientResponse]]:
    """List clients filtered by search text, status and type (``all`` disables a filter)."""
    clients = await service.list_clients(
        ClientFilter(search=query.search, status=query.status, client_type=query.type)
    )
    return DataResponse(data=[to_client_response(client) for client in clients])


@router.get("/stats", response_model=DataResponse[ClientStatsResponse])
@inject
async def get_client_stats(
    service: ClientService = Depends(Provide[Container.client_service]),
) -> DataResponse[ClientStatsResponse]:
    """Client counts by status."""
    stats = await service.get_stats()
    return DataResponse(data=to_stats_response(stats))


@router.get("/{client_id}", response_model=DataResponse[ClientResponse])
@inject
async def get_client(
    client_id: UUID,
    service: ClientService = Depends(Provide[Container.client_service]),
) -> DataResponse[ClientResponse]:
    """Get a client by ID."""
    try:
        client = await service.get_client(client_id)
    except EntityNotFound as e:
        raise not_found(e)
    return DataResponse(data=to_client_response(client))


@router.post("", response_model=DataMessageResponse[ClientResponse], status_code=status.HTTP_201_CREATED)
@inject
async def create_client(
    caller: CallerIdentity = Depends(authenticate),
    request: CreateClientRequest = Depends(validate_body(CreateClientRequest)),
    service: ClientService = Depends(Provide[Container.client_service]),
) -> DataMessageResponse[ClientResponse]:
    """Create a new client owned by the caller."""
    try:
        client = await service.create_client(request, created_by=caller.id)
    except ConflictingEntityFound as e:
        raise email_conflict(e)
    return DataMessageResponse(message="Client created successfully", data=to_client_response(client))


@router.patch("/{client_id}", response_model=DataMessageResponse[ClientResponse])
@inject
async def update_client(
    client_id: UUID,
    request: UpdateClientRequest = Depends(validate_body(UpdateClientRequest)),
    service: ClientService = Depends(Provide[Container.client_service]),
) -> DataMessageResponse[ClientResponse]:
    """Update the fields present in the body; other fields keep their values."""
    try:
        client = await service.update_client(client_id, request)
    except EntityNotFound as e:
        raise not_found(e)
    except ConflictingEntityFound as e:
        raise email_conflict(e)
    return DataMessageResponse(message="Client updated successfully", data=to_client_response(client))


@router.patch("/{client_id}/archive", response_model=MessageResponse)
@inject
async def archive_client(
    client_id: UUID,
    service: ClientService = Depends(Provide[Container.client_service]),
) -> MessageResponse:
    """Set the client's status to archived."""
    try:
        await service.archive_client(client_id)
    except EntityNotFound as e:
        raise not_found(e)
    return MessageResponse(message="Client archived successfully")


@router.delete("/{client_id}", response_model=MessageResponse)
@inject
async def delete_client(
    client_id: UUID,
    service: ClientService = Depends(Provide[Container.client_service]),
) -> MessageResponse:
    """Delete a client."""
    try:
        await service.delete_client(client_id)
    except EntityNotFound as e:
        raise not_found(e)
    return MessageResponse(message="Client deleted successfully")
