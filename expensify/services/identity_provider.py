"""Identity provider adapter.

Resolves an inbound bearer credential to a principal id. Production tokens
are Clerk session JWTs signed with RS256 and verified against the
provider's JWKS endpoint; local development can use HS256 tokens signed
with a shared secret.
"""

import logging
from dataclasses import dataclass

import jwt

from expensify.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated end-user. Only the opaque provider id is known locally."""

    id: str


class IdentityProvider:
    """Verifies bearer JWTs and extracts the ``sub`` claim."""

    def __init__(
        self,
        *,
        jwks_url: str | None = None,
        secret_key: str | None = None,
        algorithm: str = "HS256",
        issuer: str | None = None,
        audience: str | None = None,
        leeway: int = 0,
    ):
        if not jwks_url and not secret_key:
            raise ValueError("IdentityProvider needs either a JWKS URL or a shared secret")

        self.issuer = issuer or None
        self.audience = audience or None
        self.leeway = leeway
        self._jwks_client = jwt.PyJWKClient(jwks_url) if jwks_url else None
        self._secret_key = secret_key
        self._algorithms = ["RS256"] if jwks_url else [algorithm]

    def _signing_key(self, token: str):
        if self._jwks_client is not None:
            return self._jwks_client.get_signing_key_from_jwt(token).key
        return self._secret_key

    def decode(self, token: str) -> dict | None:
        """Verify a token and return its claims, or None if it is not acceptable."""
        try:
            return jwt.decode(
                token,
                self._signing_key(token),
                algorithms=self._algorithms,
                issuer=self.issuer,
                audience=self.audience,
                leeway=self.leeway,
                options={
                    "require": ["exp", "sub"],
                    "verify_aud": self.audience is not None,
                },
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired token")
            return None
        except jwt.PyJWTError as e:
            logger.info("Rejected invalid token: %s", e)
            return None

    def resolve_principal(self, token: str) -> Principal | None:
        """Map a bearer credential to the principal it was issued for."""
        claims = self.decode(token)
        if not claims:
            return None

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return Principal(id=subject)


_default_provider: IdentityProvider | None = None


def get_identity_provider() -> IdentityProvider:
    """Get the identity provider configured from settings."""
    global _default_provider
    if _default_provider is None:
        _default_provider = IdentityProvider(
            jwks_url=settings.clerk_jwks_url or None,
            secret_key=settings.auth_jwt_secret or None,
            algorithm=settings.auth_jwt_algorithm,
            issuer=settings.clerk_issuer or None,
            audience=settings.clerk_audience or None,
            leeway=settings.auth_leeway_seconds,
        )
    return _default_provider
