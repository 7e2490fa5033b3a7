# freelancy_api/auth/firebase.py
"""
Firebase ID token verification.

Responsibilities:
- Bootstrap from the base64-encoded service account credential
- Lazy JWKS fetching (no network calls on construction)
- In-memory JWKS caching with configurable TTL
- Clear typed exceptions for verification failures

Firebase ID tokens are RS256 JWTs signed by Google's ``securetoken`` service
account. A token is accepted when its signature matches a published key, it is
unexpired, ``iss`` is ``https://securetoken.google.com/<project_id>``, ``aud``
is ``<project_id>``, and it carries a non-empty ``sub`` and an ``email``.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import ssl
import threading
import time
from typing import Any
from urllib.request import urlopen

import certifi

from jose import JWTError, jwk, jwt

from freelancy_api.auth.identity import Principal
from freelancy_api.core.config import FIREBASE_ISSUER_PREFIX, Settings


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TokenVerificationError(Exception):
    """Base exception for ID token verification failures."""

    pass


class VerifierNotConfiguredError(TokenVerificationError):
    """Raised when the verifier has no project id to check tokens against."""

    pass


class JWKSFetchError(TokenVerificationError):
    """Raised when the signing keys cannot be fetched."""

    pass


class TokenExpiredError(TokenVerificationError):
    """Raised when the token has expired."""

    pass


class InvalidSignatureError(TokenVerificationError):
    """Raised when the token signature is invalid."""

    pass


class IssuerMismatchError(TokenVerificationError):
    """Raised when the token issuer is not this project's securetoken issuer."""

    pass


class AudienceMismatchError(TokenVerificationError):
    """Raised when the token audience is not this project."""

    pass


class InvalidTokenError(TokenVerificationError):
    """Raised for general token validation failures."""

    pass


# ---------------------------------------------------------------------------
# Service account credential
# ---------------------------------------------------------------------------


def load_service_account(encoded: str) -> dict[str, Any]:
    """
    Decode the base64 service account credential into its JSON document.

    Raises RuntimeError if the value is empty, not base64, or not a JSON object.
    The credential itself is never logged.
    """
    if not encoded or not encoded.strip():
        raise RuntimeError("FIREBASE_SERVICE_KEY must be set")

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
        account = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise RuntimeError("FIREBASE_SERVICE_KEY is not a base64-encoded JSON document") from e

    if not isinstance(account, dict):
        raise RuntimeError("FIREBASE_SERVICE_KEY must decode to a JSON object")
    return account


# ---------------------------------------------------------------------------
# JWKS Cache
# ---------------------------------------------------------------------------


class _JWKSCache:
    """
    Thread-safe in-memory cache for the provider's signing keys.

    The cache is populated lazily on first verification attempt.
    """

    def __init__(self, jwks_url: str, ttl_seconds: int, timeout_seconds: float) -> None:
        self._jwks_url = jwks_url
        self._ttl = ttl_seconds
        self._timeout = timeout_seconds
        self._lock = threading.Lock()
        self._keys: dict[str, Any] | None = None
        self._fetched_at: float = 0.0

    def get_signing_key(self, kid: str) -> Any:
        """
        Get the signing key for the given key ID.

        Fetches JWKS if not cached or cache has expired.
        Raises JWKSFetchError if fetch fails.
        Raises InvalidTokenError if kid not found.
        """
        with self._lock:
            now = time.time()

            if self._keys is None or (now - self._fetched_at) > self._ttl:
                self._refresh_keys()

            if kid not in self._keys:
                # Keys rotate; try one refresh.
                self._refresh_keys()

            if kid not in self._keys:
                raise InvalidTokenError(f"Signing key not found for kid: {kid}")

            return self._keys[kid]

    def _refresh_keys(self) -> None:
        """Fetch JWKS and rebuild the key map."""
        if not self._jwks_url:
            raise VerifierNotConfiguredError("JWKS URL not configured")

        try:
            logger.info("Fetching identity provider JWKS from %s", self._jwks_url)
            context = ssl.create_default_context(cafile=certifi.where())
            with urlopen(self._jwks_url, timeout=self._timeout, context=context) as resp:
                data = json.loads(resp.read().decode("utf-8"))
        except Exception as e:
            logger.error("Failed to fetch identity provider JWKS: %s", e)
            raise JWKSFetchError(f"Failed to fetch JWKS: {e}") from e

        keys_list = data.get("keys", []) if isinstance(data, dict) else []
        if not keys_list:
            raise JWKSFetchError("JWKS response contains no keys")

        keys: dict[str, Any] = {}
        for key_data in keys_list:
            kid = key_data.get("kid")
            if kid:
                try:
                    keys[kid] = jwk.construct(key_data, algorithm="RS256")
                except Exception as e:
                    logger.warning("Failed to construct key for kid=%s: %s", kid, e)

        self._keys = keys
        self._fetched_at = time.time()
        logger.info("Cached %d identity provider signing keys", len(self._keys))

    def clear(self) -> None:
        """Clear the cache (useful for testing)."""
        with self._lock:
            self._keys = None
            self._fetched_at = 0.0


# ---------------------------------------------------------------------------
# Token Verification
# ---------------------------------------------------------------------------


class FirebaseTokenVerifier:
    """
    Verifies Firebase ID tokens for one project.

    Build it once at startup (``from_settings``) and share it; the only mutable
    state is the JWKS cache, which is lock-protected.
    """

    def __init__(
        self,
        project_id: str,
        jwks_url: str,
        cache_seconds: int = 3600,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.project_id = project_id
        self.issuer = f"{FIREBASE_ISSUER_PREFIX}{project_id}" if project_id else ""
        self._jwks_cache = _JWKSCache(jwks_url, cache_seconds, timeout_seconds)

    @classmethod
    def from_settings(cls, settings: Settings) -> FirebaseTokenVerifier:
        """
        Build a verifier from the service account credential in settings.

        FIREBASE_PROJECT_ID, when set, takes precedence over the credential's
        ``project_id``. Raises RuntimeError when no project id can be found.
        """
        project_id = settings.FIREBASE_PROJECT_ID
        if settings.FIREBASE_SERVICE_KEY or not project_id:
            account = load_service_account(settings.FIREBASE_SERVICE_KEY)
            project_id = project_id or str(account.get("project_id") or "").strip()

        if not project_id:
            raise RuntimeError("Service account credential has no project_id")

        logger.info("Identity verifier configured for project %s", project_id)
        return cls(
            project_id=project_id,
            jwks_url=settings.FIREBASE_JWKS_URL,
            cache_seconds=settings.FIREBASE_JWKS_CACHE_SECONDS,
            timeout_seconds=settings.FIREBASE_JWKS_TIMEOUT_SECONDS,
        )

    def clear_cache(self) -> None:
        self._jwks_cache.clear()

    def verify_token(self, token: str) -> dict[str, Any]:
        """
        Verify a Firebase ID token and return its decoded claims.

        Raises:
            VerifierNotConfiguredError: No project id configured
            JWKSFetchError: Signing keys could not be fetched
            TokenExpiredError: Token has expired
            InvalidSignatureError: Signature verification failed
            IssuerMismatchError: Issuer does not match
            AudienceMismatchError: Audience does not match
            InvalidTokenError: Other validation failures
        """
        if not self.project_id:
            raise VerifierNotConfiguredError("Identity verifier has no project id")

        try:
            unverified_header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise InvalidTokenError(f"Invalid token header: {e}") from e

        if unverified_header.get("alg") != "RS256":
            raise InvalidTokenError(f"Unexpected token algorithm: {unverified_header.get('alg')}")

        kid = unverified_header.get("kid")
        if not kid:
            raise InvalidTokenError("Token header missing 'kid' claim")

        signing_key = self._jwks_cache.get_signing_key(kid)

        try:
            # python-jose validates exp/iat/nbf, aud and iss.
            claims = jwt.decode(
                token,
                signing_key,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=self.issuer,
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.JWTClaimsError as e:
            error_msg = str(e).lower()
            if "issuer" in error_msg:
                raise IssuerMismatchError(f"Issuer mismatch: {e}") from e
            if "audience" in error_msg:
                raise AudienceMismatchError(f"Audience mismatch: {e}") from e
            raise InvalidTokenError(f"Claims validation failed: {e}") from e
        except JWTError as e:
            raise InvalidSignatureError(f"Signature verification failed: {e}") from e

        sub = claims.get("sub")
        if not isinstance(sub, str) or not sub.strip():
            raise InvalidTokenError("Token missing subject")

        auth_time = claims.get("auth_time")
        if isinstance(auth_time, (int, float)) and auth_time > time.time() + 60:
            raise InvalidTokenError("Token auth_time is in the future")

        if not isinstance(claims.get("email"), str) or not claims["email"].strip():
            raise InvalidTokenError("Token missing email claim")

        return claims

    def verify(self, token: str) -> Principal:
        """Verify ``token`` and return the caller's Principal."""
        return Principal.from_claims(self.verify_token(token))
