"""libotp.delivery -- hand generated tokens to the outside world"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Protocol

from libotp._logging import logger
from libotp.exc import InvalidKeyError, TokenDeliveryError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from libotp.generator import TokenGenerator

__all__ = [
    "Recipient",
    "SecretSource",
    "NotificationSender",
    "EventPublisher",
    "TokenDispatcher",
    "TRIGGER_NOTIFICATION",
]

#: name of the event published when a token should be sent to a user
TRIGGER_NOTIFICATION = "TRIGGER_NOTIFICATION"


@dataclasses.dataclass(frozen=True)
class Recipient:
    username: str
    display_name: str | None = None
    email: str | None = None

    @property
    def name(self) -> str:
        return self.display_name or self.username


class SecretSource(Protocol):
    def get_secret(self, username: str) -> str | None:
        """Returns the (already decrypted) encoded secret for *username*, if any."""
        ...


class NotificationSender(Protocol):
    def send_token(self, recipient: Recipient, token: str) -> None: ...


class EventPublisher(Protocol):
    def publish(self, name: str, properties: Mapping[str, object]) -> None: ...


class TokenDispatcher:
    """
    Generates a token for a user and sends it out of band.

    Depending on :attr:`TokenSettings.event_delivery`, the token is either
    published as a :data:`TRIGGER_NOTIFICATION` event, or handed to the
    notification sender directly.  Errors raised by the collaborators
    propagate unchanged.
    """

    def __init__(
        self,
        generator: TokenGenerator,
        secrets: SecretSource,
        notifier: NotificationSender | None = None,
        events: EventPublisher | None = None,
    ) -> None:
        self._generator = generator
        self._secrets = secrets
        self._notifier = notifier
        self._events = events

    def dispatch(self, recipient: Recipient) -> str:
        if not recipient.email:
            raise TokenDeliveryError(
                f"no address to send the token to for user: {recipient.username}"
            )
        secret = self._secrets.get_secret(recipient.username)
        if not secret:
            raise InvalidKeyError(f"no secret key found for user: {recipient.username}")

        token = self._generator.generate(secret)
        if self._generator.settings.event_delivery:
            self._publish(recipient, token)
        else:
            self._notify(recipient, token)
        logger.debug("token sent to user: %s", recipient.username)
        return token

    def _publish(self, recipient: Recipient, token: str) -> None:
        if self._events is None:
            raise TokenDeliveryError("event delivery enabled, but no event publisher configured")
        logger.debug("using event publisher to deliver token")
        self._events.publish(
            TRIGGER_NOTIFICATION,
            {
                "user-name": recipient.username,
                "display-name": recipient.name,
                "send-to": recipient.email,
                "totp-token": token,
            },
        )

    def _notify(self, recipient: Recipient, token: str) -> None:
        if self._notifier is None:
            raise TokenDeliveryError("no notification sender configured")
        self._notifier.send_token(recipient, token)
