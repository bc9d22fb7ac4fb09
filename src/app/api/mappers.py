"""Mappers for converting between domain models and API schemas."""
from src.app.core.domain.models import AuthSession, CallerIdentity, Client, ClientStats, SignupResult
from src.client.schemas import (
    ClientResponse,
    ClientStatsResponse,
    SessionResponse,
    SignupResponse,
    UserResponse,
)


def to_client_response(client: Client) -> ClientResponse:
    """
    Convert a Client domain model to ClientResponse API schema.

    Args:
        client: Domain model

    Returns:
        API response schema
    """
    return ClientResponse(
        id=client.id,
        name=client.name,
        email=client.email,
        phone=client.phone,
        company=client.company,
        address=client.address,
        license_number=client.license_number,
        client_type=client.client_type,
        status=str(client.status),
        notes=client.notes,
        created_by=client.created_by,
        created_at=client.created_at,
        updated_at=client.updated_at,
    )


def to_stats_response(stats: ClientStats) -> ClientStatsResponse:
    return ClientStatsResponse(**stats.model_dump())


def to_user_response(identity: CallerIdentity) -> UserResponse:
    return UserResponse(
        id=identity.id,
        email=identity.email,
        full_name=identity.full_name,
        email_confirmed=identity.email_confirmed,
    )


def to_session_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        token_type=session.token_type,
        expires_in=session.expires_in,
        user=to_user_response(session.user),
    )


def to_signup_response(result: SignupResult) -> SignupResponse:
    return SignupResponse(
        user=to_user_response(result.user),
        session=to_session_response(result.session) if result.session else None,
    )
