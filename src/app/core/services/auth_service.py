"""Authentication use cases, delegated to the identity provider."""
import logging

from src.app.core.domain.models import AuthSession, CallerIdentity, SignupResult
from src.app.infrastructure.identity_provider import IdentityProvider
from src.client.schemas import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    SignupRequest,
    VerifyEmailRequest,
)
from src.shared.exceptions import AuthenticationFailed, Unauthorized

logger = logging.getLogger(__name__)


class AuthService:
    """Service for sign-up, sign-in and password flows."""

    def __init__(self, identity_provider: IdentityProvider):
        self.identity_provider = identity_provider

    async def signup(self, request: SignupRequest) -> SignupResult:
        result = await self.identity_provider.sign_up(
            email=request.email,
            password=request.password,
            full_name=request.full_name.strip(),
        )
        logger.info("Registered user %s", result.user.id)
        return result

    async def login(self, request: LoginRequest) -> AuthSession:
        return await self.identity_provider.sign_in(request.email, request.password)

    async def refresh(self, request: RefreshTokenRequest) -> AuthSession:
        return await self.identity_provider.refresh_session(request.refresh_token)

    async def verify_email(self, request: VerifyEmailRequest) -> AuthSession:
        return await self.identity_provider.verify(request.token, request.type.value)

    async def resend_verification(self, request: ResendVerificationRequest) -> None:
        await self.identity_provider.resend_verification(request.email)

    async def forgot_password(self, request: ForgotPasswordRequest) -> None:
        await self.identity_provider.send_password_reset(request.email)

    async def reset_password(self, request: ResetPasswordRequest) -> CallerIdentity:
        # The reset token is the access token of the recovery session
        return await self.identity_provider.update_password(request.token, request.password)

    async def change_password(
        self,
        caller: CallerIdentity,
        access_token: str,
        request: ChangePasswordRequest,
    ) -> CallerIdentity:
        """Re-authenticate with the current password, then set the new one."""
        if not caller.email:
            raise Unauthorized()
        try:
            await self.identity_provider.sign_in(caller.email, request.current_password)
        except AuthenticationFailed as e:
            raise AuthenticationFailed("Current password is incorrect", e.status_code) from e
        identity = await self.identity_provider.update_password(access_token, request.new_password)
        logger.info("Changed password for user %s", caller.id)
        return identity

    async def logout(self, access_token: str) -> None:
        await self.identity_provider.sign_out(access_token)
