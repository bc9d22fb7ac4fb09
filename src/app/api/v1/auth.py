from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from src.app.api.dependencies import authenticate, get_access_token
from src.app.api.error_handlers import ApiError
from src.app.api.mappers import to_session_response, to_signup_response, to_user_response
from src.app.api.validation import validate_body
from src.app.containers import Container
from src.app.core.domain.models import CallerIdentity
from src.app.core.services.auth_service import AuthService
from src.client.schemas import (
    ChangePasswordRequest,
    DataMessageResponse,
    DataResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    SessionResponse,
    SignupRequest,
    SignupResponse,
    UserResponse,
    VerifyEmailRequest,
)
from src.shared.exceptions import AuthenticationFailed, IdentityProviderError, Unauthorized
from src.app.logging import get_logger

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


def provider_error(e: IdentityProviderError, action: str) -> ApiError:
    """Map an identity provider rejection to the response sent to the caller."""
    logger.warning(f"Failed to {action}: {e}")
    if isinstance(e, AuthenticationFailed):
        return ApiError(status.HTTP_401_UNAUTHORIZED, e.message)
    return ApiError(status.HTTP_400_BAD_REQUEST, e.message)


@router.post("/signup", response_model=DataMessageResponse[SignupResponse], status_code=status.HTTP_201_CREATED)
@inject
async def signup(
    request: SignupRequest = Depends(validate_body(SignupRequest)),
    service: AuthService = Depends(Provide[Container.auth_service]),
) -> DataMessageResponse[SignupResponse]:
    """Register a user with the identity provider."""
    try:
        result = await service.signup(request)
    except IdentityProviderError as e:
        raise provider_error(e, "sign up")
    return DataMessageResponse(
        message="User registered successfully. Please check your email to verify your account.",
        data=to_signup_response(result),
    )


@router.post("/login", response_model=DataMessageResponse[SessionResponse])
@inject
async def login(
    request: LoginRequest = Depends(validate_body(LoginRequest)),
    service: AuthService = Depends(Provide[Container.auth_service]),
) -> DataMessageResponse[SessionResponse]:
    try:
        session = await service.login(request)
    except AuthenticationFailed as e:
        logger.warning(f"Login rejected: {e}")
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid email or password")
    except IdentityProviderError as e:
        raise provider_error(e, "log in")
    return DataMessageResponse(message="Login successful", data=to_session_response(session))


@router.post("/refresh", response_model=DataMessageResponse[SessionResponse])
@inject
async def refresh(
    request: RefreshTokenRequest = Depends(validate_body(RefreshTokenRequest)),
    service: AuthService = Depends(Provide[Container.auth_service]),
) -> DataMessageResponse[SessionResponse]:
    try:
        session = await service.refresh(request)
    except IdentityProviderError as e:
        raise provider_error(e, "refresh session")
    return DataMessageResponse(message="Token refreshed successfully", data=to_session_response(session))


@router.post("/verify-email", response_model=DataMessageResponse[SessionResponse])
@inject
async def verify_email(
    request: VerifyEmailRequest = Depends(validate_body(VerifyEmailRequest)),
    service: AuthService = Depends(Provide[Container.auth_service]),
) -> DataMessageResponse[SessionResponse]:
    try:
        session = await service.verify_email(request)
    except IdentityProviderError as e:
        raise provider_error(e, "verify email")
    return DataMessageResponse(message="Email verified successfully", data=to_session_response(session))


@router.post("/resend-verification", response_model=MessageResponse)
@inject
async def resend_verification(
    request: ResendVerificationRequest = Depends(validate_body(ResendVerificationRequest)),
    service: AuthService = Depends(Provide[Container.auth_service]),
) -> MessageResponse:
    try:
        await service.resend_verification(request)
    except IdentityProviderError as e:
        raise provider_error(e, "resend verification")
    return MessageResponse(message="Verification email sent")


@router.post("/forgot-password", response_model=MessageResponse)
@inject
async def forgot_password(
    request: ForgotPasswordRequest = Depends(validate_body(ForgotPasswordRequest)),
    service: AuthService = Depends(Provide[Container.auth_service]),
) -> MessageResponse:
    try:
        await service.forgot_password(request)
    except IdentityProviderError as e:
        raise provider_error(e, "send password reset")
    return MessageResponse(message="Password reset email sent")


@router.post("/reset-password", response_model=MessageResponse)
@inject
async def reset_password(
    request: ResetPasswordRequest = Depends(validate_body(ResetPasswordRequest)),
    service: AuthService = Depends(Provide[Container.auth_service]),
) -> MessageResponse:
    try:
        await service.reset_password(request)
    except IdentityProviderError as e:
        raise provider_error(e, "reset password")
    return MessageResponse(message="Password reset successfully")


@router.post("/change-password", response_model=MessageResponse)
@inject
async def change_password(
    caller: CallerIdentity = Depends(authenticate),
    access_token: str = Depends(get_access_token),
    request: ChangePasswordRequest = Depends(validate_body(ChangePasswordRequest)),
    service: AuthService = Depends(Provide[Container.auth_service]),
) -> MessageResponse:
    try:
        await service.change_password(caller, access_token, request)
    except Unauthorized:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    except AuthenticationFailed as e:
        logger.warning(f"Password change rejected: {e}")
        raise ApiError(status.HTTP_400_BAD_REQUEST, e.message)
    except IdentityProviderError as e:
        raise provider_error(e, "change password")
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse)
@inject
async def logout(
    _: CallerIdentity = Depends(authenticate),
    access_token: str = Depends(get_access_token),
    service: AuthService = Depends(Provide[Container.auth_service]),
) -> MessageResponse:
    try:
        await service.logout(access_token)
    except IdentityProviderError as e:
        raise provider_error(e, "log out")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=DataResponse[UserResponse])
async def me(caller: CallerIdentity = Depends(authenticate)) -> DataResponse[UserResponse]:
    """The verified identity behind the bearer token."""
    return DataResponse(data=to_user_response(caller))
