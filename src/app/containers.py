"""Dependency injection container using dependency-injector library."""
from dependency_injector import containers, providers
from httpx import AsyncClient, Timeout

from src.app.config import Settings
from src.shared.database.database import Database, DatabaseSettings
from src.shared.database.unit_of_work import UnitOfWork
from src.shared.database.entity_mapper import EntityMapper

from src.app.infrastructure.mappers.client_mapper import ClientMapper
from src.app.infrastructure.client_repository import ClientRepository
from src.app.infrastructure.identity_provider import GoTrueIdentityProvider, IdentityProviderSettings

from src.app.core.services.client_service import ClientService
from src.app.core.services.auth_service import AuthService

from src.app.core.domain.models import Client

API_MODULES = [
    "src.app.api.dependencies",
    "src.app.api.v1.auth",
    "src.app.api.v1.clients",
]


def create_entity_mapper(client_mapper: ClientMapper) -> EntityMapper:
    """Factory function to create EntityMapper with proper mappings."""
    return EntityMapper(
        entity_mappings={
            Client: client_mapper.to_entity,
        }
    )


def create_http_client(timeout_seconds: float) -> AsyncClient:
    """Shared httpx client for outbound calls (identity provider)."""
    return AsyncClient(timeout=Timeout(timeout_seconds))


class Container(containers.DeclarativeContainer):
    """Main application dependency injection container."""

    wiring_config = containers.WiringConfiguration(modules=API_MODULES)

    # =========================================================================
    # CONFIGURATION - Singleton (loaded once, cached)
    # =========================================================================
    config = providers.Singleton(Settings)

    # =========================================================================
    # SINGLETONS - Stateless Mappers (reusable across all requests)
    # =========================================================================
    client_mapper = providers.Singleton(ClientMapper)

    entity_mapper = providers.Singleton(
        create_entity_mapper,
        client_mapper=client_mapper,
    )

    # =========================================================================
    # SINGLETON - Database (shared connection pool)
    # =========================================================================
    database_settings = providers.Singleton(
        DatabaseSettings,
        db_url=config.provided.database_url,
        echo=config.provided.database.echo,
    )

    database = providers.Singleton(
        Database,
        db_settings=database_settings,
    )

    # =========================================================================
    # SINGLETONS - Identity provider (shared HTTP connection pool)
    # =========================================================================
    http_client = providers.Singleton(
        create_http_client,
        timeout_seconds=config.provided.identity_provider.timeout_seconds,
    )

    identity_provider_settings = providers.Singleton(
        IdentityProviderSettings,
        url=config.provided.identity_provider.url,
        api_key=config.provided.identity_provider.api_key,
        redirect_url=config.provided.identity_provider.redirect_url,
    )

    identity_provider = providers.Singleton(
        GoTrueIdentityProvider,
        settings=identity_provider_settings,
        client=http_client,
    )

    # =========================================================================
    # FACTORIES - Repositories and Unit of Work (per-request)
    # =========================================================================
    client_repository = providers.Factory(
        ClientRepository,
        db=database,
        mapper=client_mapper,
    )

    unit_of_work = providers.Factory(
        UnitOfWork,
        db=database,
        entity_mapper=entity_mapper,
    )

    # =========================================================================
    # FACTORIES - Services
    # =========================================================================
    client_service = providers.Factory(
        ClientService,
        repository=client_repository,
        unit_of_work=unit_of_work,
    )

    auth_service = providers.Factory(
        AuthService,
        identity_provider=identity_provider,
    )
