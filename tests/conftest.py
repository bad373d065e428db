"""Shared fixtures: in-memory database, fake transports and a signing wallet."""

from __future__ import annotations

import base64
import os
import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure the project root (which contains ``main`` and ``inbox``) is importable.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ADD_SECRET"] = "test-secret"
for variable in (
    "SENDGRID_API_KEY",
    "SENDGRID_SENDER",
    "WEB_PUSH_PUBLIC_KEY",
    "WEB_PUSH_PRIVATE_KEY",
    "PUSHER_HOST",
    "PROFILE_DIRECTORY_URL",
):
    os.environ.pop(variable, None)

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from inbox.domain.entities import PushSubscription
from inbox.domain.errors import DownstreamDispatchError, SubscriptionGoneError
from inbox.infrastructure.channels import DeliveryChannels
from inbox.infrastructure.email import EmailMessage
from inbox.infrastructure.identity import identity_to_address, public_key_to_identity
from inbox.infrastructure.security import make_sign_doc, serialize_sign_doc

ADD_SECRET = "test-secret"


class FakeMailer:
    """Records sent messages; fails for addresses listed in ``failing``."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, EmailMessage]] = []
        self.failing: set[str] = set()

    def send(self, recipient: str, message: EmailMessage) -> None:
        if recipient in self.failing:
            raise DownstreamDispatchError("SendGrid API request failed with status 503")
        self.sent.append((recipient, message))

    @property
    def recipients(self) -> list[str]:
        return [recipient for recipient, _ in self.sent]


class FakePushSender:
    def __init__(self) -> None:
        self.sent: list[tuple[PushSubscription, dict[str, Any]]] = []
        self.gone: set[str] = set()
        self.failing: set[str] = set()

    def send(self, subscription: PushSubscription, payload: dict[str, Any]) -> None:
        if subscription.key in self.gone:
            raise SubscriptionGoneError("Push endpoint answered 410")
        if subscription.key in self.failing:
            raise DownstreamDispatchError("Push delivery failed with status 500")
        self.sent.append((subscription, payload))


class FakeRealtime:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, Any]] = []

    async def publish(self, identity: str, *, event_type: str, payload: Any) -> None:
        self.events.append((identity, event_type, payload))


class FakeDirectory:
    """Links identities to each other the way a profile would."""

    def __init__(self) -> None:
        self.links: dict[str, set[str]] = {}

    async def expand(self, identity: str) -> set[str]:
        return {identity} | self.links.get(identity, set())


class Wallet:
    """A secp256k1 key pair that signs requests like a browser wallet."""

    chain_id = "juno-1"
    fee_denom = "ujuno"
    prefix = "juno"

    def __init__(self, secret: int) -> None:
        self.private_key = ec.derive_private_key(secret, ec.SECP256K1())
        self.public_key = (
            self.private_key.public_key()
            .public_bytes(Encoding.X962, PublicFormat.CompressedPoint)
            .hex()
        )
        self.identity = public_key_to_identity(self.public_key)
        self.address = identity_to_address(self.identity, self.prefix)

    def auth(self, nonce: int) -> dict[str, Any]:
        return {
            "type": "Inbox Config",
            "nonce": nonce,
            "chainId": self.chain_id,
            "chainFeeDenom": self.fee_denom,
            "chainBech32Prefix": self.prefix,
            "publicKey": self.public_key,
        }

    def sign(self, data: dict[str, Any]) -> str:
        message = serialize_sign_doc(
            make_sign_doc(
                data, signer=self.address, chain_id=self.chain_id, fee_denom=self.fee_denom
            )
        )
        r, s = decode_dss_signature(
            self.private_key.sign(message, ec.ECDSA(hashes.SHA256()))
        )
        return base64.b64encode(r.to_bytes(32, "big") + s.to_bytes(32, "big")).decode()

    def signed_body(self, nonce: int, **fields: Any) -> dict[str, Any]:
        data = {"auth": self.auth(nonce), **fields}
        return {"data": data, "signature": self.sign(data)}


def make_subscription(key: str = "device-key") -> dict[str, Any]:
    return {
        "endpoint": f"https://push.example.com/send/{key}",
        "expirationTime": None,
        "keys": {"p256dh": key, "auth": f"{key}-auth"},
    }


@pytest.fixture(autouse=True)
def reset_database():
    """Start every test from empty tables."""

    from inbox.infrastructure import database

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.initialize_database()
    yield


@pytest.fixture()
def session():
    from inbox.infrastructure.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture()
def push_sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture()
def realtime() -> FakeRealtime:
    return FakeRealtime()


@pytest.fixture()
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture()
def channels(mailer, push_sender, realtime, directory) -> DeliveryChannels:
    return DeliveryChannels(
        realtime=realtime,
        directory=directory,
        mailer=mailer,
        push_sender=push_sender,
        timeout=2.0,
        app_base_url="https://daodao.zone",
        ipfs_gateway_url="https://nftstorage.link/ipfs/",
        default_image_url="https://daodao.zone/daodao.png",
    )


@pytest.fixture()
def wallet() -> Wallet:
    return Wallet(0x1F2E3D4C5B6A7988)


@pytest.fixture()
def other_wallet() -> Wallet:
    return Wallet(0x0A1B2C3D4E5F6071)


@pytest.fixture()
def client(channels):
    """Return a test client whose delivery channels are the fakes above."""

    from fastapi.testclient import TestClient

    from inbox.interfaces.api.dependencies import get_delivery_channels
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_delivery_channels] = lambda: channels
    with TestClient(app) as test_client:
        yield test_client
