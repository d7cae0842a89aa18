import httpx
from automarket.core.config import settings
from automarket.core.errors import UnauthorizedError, ValidationError
from automarket.core.logging import setup_logging
from automarket.core.redis import redis_client

logger = setup_logging()


class AuthProvider:
    """Client of the external identity provider (GoTrue-compatible REST API)."""

    def __init__(
            self,
            base_url: str = settings.auth_provider_url,
            api_key: str = settings.auth_provider_api_key,
            timeout: float = 10.0):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self, token: str | None = None) -> dict:
        headers = {"apikey": self.api_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(self, method: str, path: str, token: str | None = None, **kwargs) -> httpx.Response:
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            return await client.request(method, path, headers=self._headers(token), **kwargs)

    @staticmethod
    def _error_message(response: httpx.Response, default: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return default
        return body.get("msg") or body.get("error_description") or body.get("message") or default

    async def sign_up(self, email: str, password: str, name: str) -> dict:
        response = await self._request(
            "POST", "/signup",
            json={"email": email, "password": password, "data": {"full_name": name}}
        )
        if response.status_code >= 400:
            logger.error(f"Sign up failed for {email}: {response.status_code}")
            raise ValidationError(self._error_message(response, "Sign up failed"))
        return response.json()

    async def sign_in(self, email: str, password: str) -> dict:
        response = await self._request(
            "POST", "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password}
        )
        if response.status_code >= 400:
            logger.error(f"Sign in failed for {email}: {response.status_code}")
            raise UnauthorizedError("Invalid email or password")
        return response.json()

    async def sign_out(self, token: str) -> None:
        await redis_client.drop_identity(token)
        response = await self._request("POST", "/logout", token=token)
        if response.status_code >= 400:
            logger.warning(f"Auth provider logout returned {response.status_code}")

    async def get_current_user(self, token: str) -> dict | None:
        """Return {id, email, name} for a token, None when the provider rejects it"""
        cached = await redis_client.get_identity(token)
        if cached:
            return cached

        try:
            response = await self._request("GET", "/user", token=token)
        except httpx.HTTPError as e:
            logger.error(f"Auth provider unreachable: {e}")
            return None
        if response.status_code != 200:
            return None

        data = response.json()
        email = data.get("email")
        metadata = data.get("user_metadata") or {}
        identity = {
            "id": str(data["id"]),
            "email": email,
            "name": metadata.get("full_name") or (email.split("@")[0] if email else "User"),
        }
        await redis_client.set_identity(token, identity)
        return identity


auth_provider = AuthProvider()
