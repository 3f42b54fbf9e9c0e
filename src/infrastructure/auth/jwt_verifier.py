"""Bearer token verification."""

from jose import ExpiredSignatureError, JWTError, jwt

from src.commons.telemetry import get_logger
from src.domain.exceptions import AuthenticationException


class JWTTokenVerifier:
    """Verifies HMAC-signed JWTs and extracts the caller's identity.

    Tokens are issued elsewhere; this class only checks signature and
    expiry and reads the owner claim.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        owner_claim: str = "sub",
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._owner_claim = owner_claim
        self._logger = get_logger(__name__)

    def verify(self, token: str) -> str:
        """Validate a token and return the owner identity.

        Args:
            token: Encoded JWT, without the ``Bearer`` prefix.

        Returns:
            Value of the owner claim.

        Raises:
            AuthenticationException: If the token is malformed, badly
                signed, expired or has no owner claim.
        """
        if not token:
            raise AuthenticationException("Missing bearer token")
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as e:
            raise AuthenticationException("Token has expired") from e
        except JWTError as e:
            self._logger.debug("Rejected bearer token", extra={"error": str(e)})
            raise AuthenticationException() from e

        owner = claims.get(self._owner_claim)
        if not isinstance(owner, str) or not owner:
            raise AuthenticationException(
                f"Token has no '{self._owner_claim}' claim"
            )
        return owner
