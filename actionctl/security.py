"""
Security collaborators used by the controller helpers.

Only what ``AbstractController.user`` and ``encode_password`` delegate to:
a token storage holding the current user, and password encoders selected
by user type. Authentication itself belongs to the host application.
"""

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Protocol, Union, runtime_checkable
import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from passlib.context import CryptContext

if TYPE_CHECKING:
    from .app import Application


logger = logging.getLogger("actionctl.security")


# ============================================================================
# Tokens
# ============================================================================

class Token:
    """Authentication token; ``user`` is an object or a plain username string."""

    def __init__(self, user: Any, roles: Optional[list] = None):
        self.user = user
        self.roles = list(roles or [])

    def get_user(self) -> Any:
        return self.user


class TokenStorage:
    """Holds the token of the current request (``app["security"]``)."""

    def __init__(self, token: Optional[Token] = None):
        self._token = token

    def get_token(self) -> Optional[Token]:
        return self._token

    def set_token(self, token: Optional[Token]) -> None:
        self._token = token


# ============================================================================
# Encoders
# ============================================================================

@runtime_checkable
class PasswordEncoder(Protocol):

    def encode_password(self, raw: str, salt: Optional[str]) -> str:
        ...

    def is_password_valid(self, encoded: str, raw: str, salt: Optional[str]) -> bool:
        ...


class Argon2PasswordEncoder:
    """
    Argon2id encoder (argon2-cffi).

    Argon2 generates and embeds its own salt, so the user salt is ignored.
    """

    def __init__(
        self,
        time_cost: int = 2,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ):
        self.hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    def encode_password(self, raw: str, salt: Optional[str] = None) -> str:
        return self.hasher.hash(raw)

    def is_password_valid(self, encoded: str, raw: str, salt: Optional[str] = None) -> bool:
        try:
            return self.hasher.verify(encoded, raw)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False


class PasslibPasswordEncoder:
    """
    Encoder backed by a passlib scheme (pbkdf2_sha256 by default).

    The scheme salts hashes itself; the user salt is ignored.
    """

    def __init__(self, scheme: str = "pbkdf2_sha256", **settings: Any):
        self.scheme = scheme
        self.context = CryptContext(schemes=[scheme], **settings)

    def encode_password(self, raw: str, salt: Optional[str] = None) -> str:
        return self.context.hash(raw)

    def is_password_valid(self, encoded: str, raw: str, salt: Optional[str] = None) -> bool:
        try:
            return self.context.verify(raw, encoded)
        except ValueError:
            return False


class EncoderFactory:
    """
    Selects the password encoder for a user.

    Keys are user classes (matched along the MRO) or class names.

    Example:
        factory = EncoderFactory({User: Argon2PasswordEncoder()})
        factory.get_encoder(user).encode_password("secret", user.get_salt())
    """

    def __init__(self, encoders: Optional[Mapping[Union[type, str], PasswordEncoder]] = None):
        self.encoders: Dict[Union[type, str], PasswordEncoder] = dict(encoders or {})

    def get_encoder(self, user: Any) -> PasswordEncoder:
        for cls in type(user).__mro__:
            for key in (cls, cls.__name__):
                if key in self.encoders:
                    return self.encoders[key]

        raise RuntimeError(f'No encoder has been configured for account "{type(user).__name__}".')


class SecurityServiceProvider:
    """
    Defines ``security`` (TokenStorage) and ``security.encoder_factory``.

    Args:
        encoders: Mapping of user class (or class name) to encoder
    """

    def __init__(self, encoders: Optional[Mapping[Union[type, str], PasswordEncoder]] = None):
        self.encoders = encoders

    def register(self, app: "Application") -> None:
        app["security"] = app.share(lambda app: TokenStorage())
        app["security.encoder_factory"] = app.share(lambda app: EncoderFactory(self.encoders))

    def boot(self, app: "Application") -> None:
        logger.debug("Security collaborators ready (%d encoders)", len(self.encoders or {}))
