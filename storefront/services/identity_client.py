# storefront/services/identity_client.py
import requests
from pydantic import ValidationError as SchemaError
from requests import RequestException

from storefront.domain.errors import BackendError
from storefront.domain.schemas import Identity
from storefront.utils.retry import http_retry
from storefront.utils.settings import IDENTITY_SERVICE_URL, IDENTITY_API_KEY, IDENTITY_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def bearer_token(authorization: str | None) -> str | None:
    """Token part of an `Authorization: Bearer <token>` header, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class IdentityClient:
    """Resolves bearer tokens against the hosted auth provider (`GET /auth/v1/user`)."""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or IDENTITY_SERVICE_URL).rstrip("/")
        self.api_key = IDENTITY_API_KEY if api_key is None else api_key
        self.timeout = timeout or IDENTITY_TIMEOUT_SECONDS

    @http_retry()
    def _get_user(self, token: str) -> requests.Response:
        url = f"{self.base_url}/auth/v1/user"
        logger.info(f"IdentityClient GET {url}")
        headers = {"Authorization": f"Bearer {token}"}
        if self.api_key:
            headers["apikey"] = self.api_key
        return requests.get(url, headers=headers, timeout=self.timeout)

    def resolve(self, token: str | None) -> Identity | None:
        """
        Returns the identity behind the token, or None when the gateway does
        not recognise it. Transport failures and 5xx answers raise BackendError.
        """
        if not token:
            return None

        try:
            resp = self._get_user(token)
        except RequestException as e:
            logger.error(f"Identity gateway unreachable: {e}")
            raise BackendError("خطا در ارتباط با سرویس احراز هویت", detail=str(e)) from e

        if resp.status_code in (401, 403, 404):
            return None
        if resp.status_code >= 400:
            logger.error(f"Identity gateway answered {resp.status_code}")
            raise BackendError("خطا در ارتباط با سرویس احراز هویت", detail=f"HTTP {resp.status_code}")

        try:
            return Identity.model_validate(resp.json())
        except (ValueError, SchemaError) as e:
            logger.warning(f"Identity gateway returned a malformed user: {e}")
            return None
