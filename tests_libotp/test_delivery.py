from __future__ import annotations

import logging
from collections.abc import Mapping

import pytest

from libotp.delivery import TRIGGER_NOTIFICATION, Recipient, TokenDispatcher
from libotp.exc import ErrorKind, InvalidKeyError, TokenDeliveryError
from libotp.generator import TokenGenerator, TokenSettings
from tests_libotp.utils_ import RFC_KEY_BASE32, FakeClock

ALICE = Recipient(username="alice", display_name="Alice", email="alice@example.com")


class DictSecrets:
    def __init__(self, secrets: Mapping[str, str]) -> None:
        self._secrets = dict(secrets)

    def get_secret(self, username: str) -> str | None:
        return self._secrets.get(username)


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[Recipient, str]] = []

    def send_token(self, recipient: Recipient, token: str) -> None:
        self.sent.append((recipient, token))


class RecordingPublisher:
    def __init__(self) -> None:
        self.events: list[tuple[str, Mapping[str, object]]] = []

    def publish(self, name: str, properties: Mapping[str, object]) -> None:
        self.events.append((name, properties))


@pytest.fixture
def secrets() -> DictSecrets:
    return DictSecrets({"alice": RFC_KEY_BASE32})


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


def make_generator(**kwds) -> TokenGenerator:
    return TokenGenerator(TokenSettings(**kwds), clock=FakeClock(59))


def test_dispatch_w_notifier(
    secrets: DictSecrets,
    notifier: RecordingNotifier,
    publisher: RecordingPublisher,
    caplog: pytest.LogCaptureFixture,
) -> None:
    dispatcher = TokenDispatcher(make_generator(), secrets, notifier, publisher)
    with caplog.at_level(logging.DEBUG, logger="libotp"):
        token = dispatcher.dispatch(ALICE)
    assert token == "287082"
    assert notifier.sent == [(ALICE, "287082")]
    assert publisher.events == []

    # neither secret nor token end up in the logs
    assert "alice" in caplog.text
    assert "287082" not in caplog.text
    assert RFC_KEY_BASE32 not in caplog.text


def test_dispatch_w_events(
    secrets: DictSecrets,
    notifier: RecordingNotifier,
    publisher: RecordingPublisher,
) -> None:
    dispatcher = TokenDispatcher(
        make_generator(event_delivery=True), secrets, notifier, publisher
    )
    assert dispatcher.dispatch(ALICE) == "287082"
    assert notifier.sent == []
    assert publisher.events == [
        (
            TRIGGER_NOTIFICATION,
            {
                "user-name": "alice",
                "display-name": "Alice",
                "send-to": "alice@example.com",
                "totp-token": "287082",
            },
        )
    ]


def test_dispatch_display_name_defaults_to_username(
    secrets: DictSecrets, publisher: RecordingPublisher
) -> None:
    recipient = Recipient(username="alice", email="alice@example.com")
    assert recipient.name == "alice"
    dispatcher = TokenDispatcher(
        make_generator(event_delivery=True), secrets, events=publisher
    )
    dispatcher.dispatch(recipient)
    _, properties = publisher.events[0]
    assert properties["display-name"] == "alice"


def test_dispatch_missing_secret(notifier: RecordingNotifier) -> None:
    dispatcher = TokenDispatcher(make_generator(), DictSecrets({}), notifier)
    with pytest.raises(InvalidKeyError):
        dispatcher.dispatch(ALICE)
    assert notifier.sent == []


def test_dispatch_missing_address(
    secrets: DictSecrets, notifier: RecordingNotifier
) -> None:
    dispatcher = TokenDispatcher(make_generator(), secrets, notifier)
    with pytest.raises(TokenDeliveryError) as excinfo:
        dispatcher.dispatch(Recipient(username="alice"))
    assert excinfo.value.kind is ErrorKind.DELIVERY
    assert notifier.sent == []


def test_dispatch_missing_channel(secrets: DictSecrets) -> None:
    with pytest.raises(TokenDeliveryError):
        TokenDispatcher(make_generator(), secrets).dispatch(ALICE)
    with pytest.raises(TokenDeliveryError):
        TokenDispatcher(make_generator(event_delivery=True), secrets).dispatch(ALICE)


def test_dispatch_collaborator_errors_propagate(secrets: DictSecrets) -> None:
    class BrokenNotifier:
        def send_token(self, recipient: Recipient, token: str) -> None:
            raise ConnectionError("smtp server unreachable")

    dispatcher = TokenDispatcher(make_generator(), secrets, BrokenNotifier())
    with pytest.raises(ConnectionError):
        dispatcher.dispatch(ALICE)
