"""
Access token issuance and verification.

Tokens are HS256 JWTs (python-jose) wrapping an arbitrary caller-supplied
payload plus ``iat`` and ``exp`` claims. They are stateless: nothing is
persisted and verification relies only on the signature and the expiry.
"""

import structlog
from typing import Any, Dict, Optional
from datetime import datetime, timedelta, timezone
from jose import JWTError, ExpiredSignatureError, jwt

from api.src.config import Settings
from api.src.exceptions import InvalidTokenError

logger = structlog.get_logger(__name__)

# Payloads are caller supplied; aud, sub and jti pass through unchecked.
CLAIM_OPTIONS = {
    "verify_aud": False,
    "verify_sub": False,
    "verify_jti": False,
}


class TokenService:
    """Signs and verifies bearer tokens with the server-held secret."""

    def __init__(self, settings: Settings):
        """
        Initialize token service.

        Args:
            settings: Application settings holding the secret and lifetime
        """
        self.secret = settings.access_token_secret
        self.algorithm = settings.jwt_algorithm
        self.expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

    def issue(self, payload: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed token embedding ``payload``.

        The payload shape is not validated; any JSON object is echoed into
        the token. ``iat``/``exp`` supplied by the caller are overwritten.

        Args:
            payload: Claims to embed (expected to contain ``email``)
            expires_delta: Custom lifetime (defaults to the configured one)

        Returns:
            Encoded JWT string
        """
        if expires_delta is None:
            expires_delta = self.expires_delta

        now = datetime.now(timezone.utc)
        to_encode = dict(payload)
        to_encode.update({
            "iat": int(now.timestamp()),
            "exp": int((now + expires_delta).timestamp()),
        })

        token = jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

        logger.info("access_token_issued", expires_in=expires_delta.total_seconds())
        return token

    def verify(self, token: Optional[str]) -> Dict[str, Any]:
        """
        Decode and validate a token.

        Args:
            token: JWT string

        Returns:
            Decoded claims (the original payload plus ``iat``/``exp``)

        Raises:
            InvalidTokenError: If the token is missing, malformed, has a bad
                signature or is expired
        """
        if not token:
            raise InvalidTokenError("Token not provided")

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options=CLAIM_OPTIONS,
            )
        except ExpiredSignatureError as e:
            logger.warning("token_expired")
            raise InvalidTokenError("Token expired", e) from e
        except JWTError as e:
            logger.warning("token_decode_failed", error=str(e))
            raise InvalidTokenError("Invalid token", e) from e
