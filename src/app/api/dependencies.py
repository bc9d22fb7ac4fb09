"""Request-scoped dependencies shared by the API routers."""
from dependency_injector.wiring import Provide, inject
from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.app.api.error_handlers import ApiError
from src.app.containers import Container
from src.app.core.domain.models import CallerIdentity
from src.app.infrastructure.identity_provider import IdentityProvider
from src.shared.exceptions import AuthenticationFailed
from src.app.logging import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def unauthorized() -> ApiError:
    return ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized")


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Extract the bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise unauthorized()
    return credentials.credentials


@inject
async def authenticate(
    access_token: str = Depends(get_access_token),
    identity_provider: IdentityProvider = Depends(Provide[Container.identity_provider]),
) -> CallerIdentity:
    """Resolve the verified caller identity for the request's bearer token."""
    try:
        return await identity_provider.get_user(access_token)
    except AuthenticationFailed as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise unauthorized()
