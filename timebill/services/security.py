"""Password hashing and signed bearer tokens."""

import logging
from dataclasses import dataclass
from typing import Any, Dict

import bcrypt
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from timebill.config import TimebillConfig
from timebill.errors import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_SALT = "timebill-auth"


@dataclass(frozen=True)
class CurrentUser:
    """Identity carried by a bearer token.

    Attributes:
        id: User id
        email: Email address at the time the token was issued
        role: ``admin``, ``user`` or ``client``
        first_name: First name
        last_name: Last name
    """

    id: int
    email: str
    role: str
    first_name: str = ""
    last_name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_client(self) -> bool:
        return self.role == "client"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "firstName": self.first_name,
            "lastName": self.last_name,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CurrentUser":
        return cls(
            id=int(payload["id"]),
            email=payload["email"],
            role=payload["role"],
            first_name=payload.get("firstName", ""),
            last_name=payload.get("lastName", ""),
        )


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        logger.warning("Password check against a malformed hash")
        return False


class TokenSigner:
    """Issues and verifies timestamped, signed bearer tokens.

    Example:
        >>> signer = TokenSigner(config)
        >>> token = signer.issue(CurrentUser(id=1, email="a@b.io", role="admin"))
        >>> signer.verify(token).id
        1
    """

    def __init__(self, config: TimebillConfig):
        self.max_age = config.token_max_age_seconds
        self._serializer = URLSafeTimedSerializer(config.secret_key, salt=TOKEN_SALT)

    def issue(self, user: CurrentUser) -> str:
        return self._serializer.dumps(user.to_payload())

    def verify(self, token: str) -> CurrentUser:
        """Decode a token.

        Raises:
            AuthenticationError: If the token is expired, tampered with or malformed
        """
        try:
            payload = self._serializer.loads(token, max_age=self.max_age)
            return CurrentUser.from_payload(payload)
        except SignatureExpired:
            logger.info("Rejected expired token")
            raise AuthenticationError("Token is not valid")
        except (BadSignature, KeyError, TypeError, ValueError):
            logger.info("Rejected invalid token")
            raise AuthenticationError("Token is not valid")
