"""Integration tests for the signed configuration and verification endpoints."""

from __future__ import annotations

import re

from conftest import Wallet, make_subscription

CODE_PATTERN = re.compile(r"code=([0-9a-f-]{36})")


class _Signer:
    """Tracks the wallet nonce across consecutive signed requests."""

    def __init__(self, client, wallet: Wallet) -> None:
        self.client = client
        self.wallet = wallet
        self.nonce = 0

    def config(self, **fields):
        response = self.client.post("/config", json=self.wallet.signed_body(self.nonce, **fields))
        self.nonce += 1
        return response


def _last_code(mailer) -> str:
    _, message = mailer.sent[-1]
    return CODE_PATTERN.search(message.html_content).group(1)


def test_config_snapshot_without_changes(client, wallet: Wallet) -> None:
    response = _Signer(client, wallet).config()

    assert response.status_code == 200
    assert response.json() == {
        "email": None,
        "verified": False,
        "types": {},
        "pushSubscriptions": 0,
        "typeAllowedMethods": {
            "joined_dao": [1, 2, 4],
            "proposal_created": [1, 2, 4],
            "proposal_executed": [2, 4],
            "proposal_closed": [2, 4],
        },
    }


def test_email_is_set_verified_and_cleared(client, wallet: Wallet, mailer) -> None:
    signer = _Signer(client, wallet)

    pending = signer.config(email="ada@example.com").json()
    assert pending["email"] == "ada@example.com"
    assert pending["verified"] is False
    assert mailer.recipients == ["ada@example.com"]

    wrong = signer.config(verify="00000000-0000-0000-0000-000000000000")
    assert wrong.status_code == 400
    assert wrong.json() == {"error": "Invalid verification code."}

    verified = signer.config(verify=_last_code(mailer)).json()
    assert verified["verified"] is True

    cleared = signer.config(email=None).json()
    assert cleared["email"] is None
    assert cleared["verified"] is False


def test_resend_reissues_the_code(client, wallet: Wallet, mailer) -> None:
    signer = _Signer(client, wallet)
    signer.config(email="ada@example.com")
    first_code = _last_code(mailer)

    signer.config(resend=True)

    assert len(mailer.sent) == 2
    assert _last_code(mailer) != first_code
    stale = signer.config(verify=first_code)
    assert stale.status_code == 400


def test_types_are_stored_and_validated(client, wallet: Wallet) -> None:
    signer = _Signer(client, wallet)

    response = signer.config(types={"joined_dao": 3, "proposal_created": 0})
    assert response.json()["types"] == {"joined_dao": 3, "proposal_created": 0}

    invalid = signer.config(types={"joined_dao": -2})
    assert invalid.status_code == 400


def test_push_actions(client, wallet: Wallet) -> None:
    signer = _Signer(client, wallet)

    subscribed = signer.config(push={"type": "subscribe", "subscription": make_subscription("phone")})
    assert subscribed.json()["pushSubscribed"] is True
    assert subscribed.json()["pushSubscriptions"] == 1

    signer.config(push={"type": "subscribe", "subscription": make_subscription("laptop")})
    checked = signer.config(push={"type": "check", "p256dh": "phone"}).json()
    assert checked["pushSubscribed"] is True
    assert checked["pushSubscriptions"] == 2

    removed = signer.config(push={"type": "unsubscribe", "p256dh": "phone"}).json()
    assert removed["pushSubscribed"] is False
    assert removed["pushSubscriptions"] == 1

    cleared = signer.config(push={"type": "unsubscribe_all"}).json()
    assert cleared == dict(cleared, pushSubscribed=False, pushSubscriptions=0)


def test_invalid_push_action(client, wallet: Wallet) -> None:
    signer = _Signer(client, wallet)

    assert signer.config(push={"type": "subscribe", "subscription": {"endpoint": "x"}}).status_code == 400
    assert signer.config(push={"type": "explode"}).status_code == 400


def test_corrupt_email_metadata(client, wallet: Wallet) -> None:
    from inbox.infrastructure.database import SessionLocal
    from inbox.infrastructure.kv_store import KeyValueStore

    session = SessionLocal()
    try:
        KeyValueStore(session).put(f"EMAIL:{wallet.identity}", "ada@example.com", metadata={})
    finally:
        session.close()

    response = _Signer(client, wallet).config()

    assert response.status_code == 500
    assert response.json()["error"].startswith("Invalid email metadata.")


def test_verify_link(client, wallet: Wallet, mailer) -> None:
    _Signer(client, wallet).config(email="ada@example.com")
    code = _last_code(mailer)

    missing_email = client.get(f"/verify/{wallet.address}/{code}")
    assert missing_email.status_code == 400
    assert missing_email.json() == {"error": "Missing email."}

    response = client.get(f"/verify/{wallet.address}/{code}", params={"email": "ada@example.com"})
    assert response.status_code == 200
    assert response.json() == {"success": True}

    reused = client.get(f"/verify/{wallet.address}/{code}", params={"email": "ada@example.com"})
    assert reused.status_code == 400


def test_verify_without_pending_address(client, wallet: Wallet) -> None:
    response = client.get(f"/verify/{wallet.address}/abc", params={"email": "ada@example.com"})

    assert response.status_code == 400
    assert response.json() == {"error": "Email not found. Try again in a few minutes or contact us."}
