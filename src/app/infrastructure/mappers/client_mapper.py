from src.shared.database.base_mapper import BaseEntityMapper
from src.app.core.domain.models import Client
from src.app.infrastructure.entities.client_entity import ClientEntity


class ClientMapper(BaseEntityMapper[Client, ClientEntity]):
    """Mapper for converting between Client domain model and ClientEntity."""

    @staticmethod
    def to_entity(model_instance: Client) -> ClientEntity:
        """Convert a Client (domain model) to ClientEntity (database entity)."""
        return ClientEntity(
            id=model_instance.id,
            name=model_instance.name,
            email=model_instance.email,
            phone=model_instance.phone,
            company=model_instance.company,
            address=model_instance.address,
            license_number=model_instance.license_number,
            client_type=model_instance.client_type,
            status=str(model_instance.status),
            notes=model_instance.notes,
            created_by=model_instance.created_by,
            created_at=model_instance.created_at,
            updated_at=model_instance.updated_at,
        )

    @staticmethod
    def to_model(entity: ClientEntity) -> Client:
        """Convert a ClientEntity (database entity) to Client (domain model)."""
        return Client(
            id=entity.id,
            name=entity.name,
            email=entity.email,
            phone=entity.phone,
            company=entity.company,
            address=entity.address,
            license_number=entity.license_number,
            client_type=entity.client_type,
            status=entity.status,
            notes=entity.notes,
            created_by=entity.created_by,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
