"""
Identity provider clients.

Authentication is delegated to an external GoTrue-compatible auth API (the
auth service bundled with hosted Postgres platforms). The service never sees
password hashes; it only forwards credentials and verifies bearer tokens.
"""
import abc
import logging
from typing import Any

from httpx import AsyncClient, Response
from pydantic import BaseModel

from src.app.core.domain.models import AuthSession, CallerIdentity, SignupResult
from src.shared.exceptions import AuthenticationFailed, IdentityProviderError

logger = logging.getLogger(__name__)


class IdentityProviderSettings(BaseModel):
    url: str
    api_key: str
    redirect_url: str | None = None


class IdentityProvider(abc.ABC):
    """Operations the API needs from an identity provider."""

    @abc.abstractmethod
    async def sign_up(self, email: str, password: str, full_name: str) -> SignupResult:
        pass

    @abc.abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        pass

    @abc.abstractmethod
    async def refresh_session(self, refresh_token: str) -> AuthSession:
        pass

    @abc.abstractmethod
    async def verify(self, token: str, verification_type: str) -> AuthSession:
        pass

    @abc.abstractmethod
    async def resend_verification(self, email: str) -> None:
        pass

    @abc.abstractmethod
    async def send_password_reset(self, email: str) -> None:
        pass

    @abc.abstractmethod
    async def update_password(self, access_token: str, password: str) -> CallerIdentity:
        pass

    @abc.abstractmethod
    async def get_user(self, access_token: str) -> CallerIdentity:
        pass

    @abc.abstractmethod
    async def sign_out(self, access_token: str) -> None:
        pass


def _error_message(response: Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"Identity provider returned {response.status_code}"
    if isinstance(payload, dict):
        for key in ("msg", "error_description", "message", "error"):
            if payload.get(key):
                return str(payload[key])
    return f"Identity provider returned {response.status_code}"


def _to_identity(user: dict[str, Any]) -> CallerIdentity:
    metadata = user.get("user_metadata") or {}
    return CallerIdentity(
        id=str(user["id"]),
        email=user.get("email"),
        full_name=metadata.get("full_name"),
        email_confirmed=bool(user.get("email_confirmed_at") or user.get("confirmed_at")),
    )


def _to_session(payload: dict[str, Any]) -> AuthSession:
    return AuthSession(
        access_token=payload["access_token"],
        refresh_token=payload["refresh_token"],
        token_type=payload.get("token_type", "bearer"),
        expires_in=payload.get("expires_in"),
        user=_to_identity(payload["user"]),
    )


class GoTrueIdentityProvider(IdentityProvider):
    """IdentityProvider backed by a GoTrue REST API."""

    def __init__(self, settings: IdentityProviderSettings, client: AsyncClient):
        """
        Args:
            settings: Auth API location and project API key
            client: Shared httpx client; its lifecycle is owned by the caller
        """
        self.settings = settings
        self._client = client
        self._base_url = settings.url.rstrip("/")

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.settings.api_key,
            "Authorization": f"Bearer {access_token or self.settings.api_key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        access_token: str | None = None,
        credentials_check: bool = False,
    ) -> dict[str, Any]:
        """
        Send a request and decode the JSON body.

        Args:
            credentials_check: Treat a 400 as rejected credentials (token grants
                answer bad passwords with 400 invalid_grant)

        Raises:
            AuthenticationFailed: On 401/403, or 400 when credentials_check is set
            IdentityProviderError: On any other 4xx/5xx answer
        """
        response = await self._client.request(
            method,
            f"{self._base_url}{path}",
            json=json,
            params=params,
            headers=self._headers(access_token),
        )
        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("Identity provider %s %s failed: %s %s", method, path, response.status_code, message)
            if response.status_code in (401, 403) or (credentials_check and response.status_code == 400):
                raise AuthenticationFailed(message, response.status_code)
            raise IdentityProviderError(message, response.status_code)

        if not response.content:
            return {}
        return response.json()

    async def sign_up(self, email: str, password: str, full_name: str) -> SignupResult:
        payload = await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": {"full_name": full_name}},
        )
        # Without auto-confirm the provider answers with the bare user object
        if "access_token" in payload:
            session = _to_session(payload)
            return SignupResult(user=session.user, session=session)
        return SignupResult(user=_to_identity(payload.get("user", payload)))

    async def sign_in(self, email: str, password: str) -> AuthSession:
        payload = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            credentials_check=True,
        )
        return _to_session(payload)

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        payload = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            credentials_check=True,
        )
        return _to_session(payload)

    async def verify(self, token: str, verification_type: str) -> AuthSession:
        payload = await self._request(
            "POST",
            "/verify",
            json={"type": verification_type, "token_hash": token},
            credentials_check=True,
        )
        return _to_session(payload)

    async def resend_verification(self, email: str) -> None:
        await self._request("POST", "/resend", json={"type": "signup", "email": email})

    async def send_password_reset(self, email: str) -> None:
        params = {"redirect_to": self.settings.redirect_url} if self.settings.redirect_url else None
        await self._request("POST", "/recover", json={"email": email}, params=params)

    async def update_password(self, access_token: str, password: str) -> CallerIdentity:
        payload = await self._request(
            "PUT", "/user", json={"password": password}, access_token=access_token
        )
        return _to_identity(payload)

    async def get_user(self, access_token: str) -> CallerIdentity:
        payload = await self._request("GET", "/user", access_token=access_token)
        return _to_identity(payload)

    async def sign_out(self, access_token: str) -> None:
        await self._request("POST", "/logout", access_token=access_token)
