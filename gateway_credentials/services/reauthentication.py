"""
Reauthentication capability consumed by credential promotion.

Password verification itself lives outside this package; an Authenticator
only answers whether an identity/secret pair is currently valid.
"""

from abc import ABC, abstractmethod
from typing import Callable

from ..exceptions import InvalidCredentialError
from ..utils.logger import get_logger


class Authenticator(ABC):
    """Re-verifies the acting user before a privileged write."""

    @abstractmethod
    def reauthenticate(self, identity: str, secret: str) -> bool:
        """Return True when the identity/secret pair is valid."""

    def verify(self, identity: str, secret: str) -> None:
        """
        Reauthenticate or raise.

        Raises:
            InvalidCredentialError: Empty input, a rejected pair, or any error
                raised by the underlying capability
        """
        logger = get_logger()

        if not identity or not secret:
            raise InvalidCredentialError(
                "Identity and password are required", identity=identity or None
            )

        try:
            accepted = self.reauthenticate(identity, secret)
        except InvalidCredentialError:
            raise
        except Exception as e:
            raise InvalidCredentialError(
                "Reauthentication could not be completed", identity=identity, cause=e
            ) from e

        if not accepted:
            raise InvalidCredentialError(identity=identity)

        logger.info("Acting user reauthenticated", extra={"identity": identity})


class CallbackAuthenticator(Authenticator):
    """Authenticator backed by a plain callable, e.g. the host application's sign-in check."""

    def __init__(self, callback: Callable[[str, str], bool]):
        self.callback = callback

    def reauthenticate(self, identity: str, secret: str) -> bool:
        return bool(self.callback(identity, secret))
