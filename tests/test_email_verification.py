"""Tests for the email verification state machine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from inbox.application.use_cases import (
    clear_email,
    get_email_record,
    get_email_state,
    get_verified_email,
    resend_verification,
    set_email,
    verify_email,
)
from inbox.domain.entities import EmailState
from inbox.domain.errors import (
    ExpiredError,
    InvalidCodeError,
    InvalidMetadataError,
    NotFoundError,
    ValidationError,
)
from inbox.infrastructure.kv_store import KeyValueStore

OWNER = "44" * 20
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_set_then_verify_round_trip(session, channels, mailer) -> None:
    record = set_email(session, channels, OWNER, "Ada@Example.com", now=NOW)

    assert get_email_state(session, OWNER) is EmailState.PENDING
    assert get_verified_email(session, OWNER) is None
    assert mailer.recipients == ["Ada@example.com"]
    _, message = mailer.sent[0]
    assert record.verification_code in message.html_content
    assert OWNER in message.html_content
    assert "3 days" in message.html_content

    verified = verify_email(session, OWNER, record.verification_code, now=NOW + timedelta(hours=1))

    assert verified.verification_code is None
    assert verified.verified_at == NOW + timedelta(hours=1)
    assert get_verified_email(session, OWNER) == "Ada@example.com"
    assert get_email_state(session, OWNER) is EmailState.VERIFIED


def test_wrong_code_leaves_address_unverified(session, channels) -> None:
    set_email(session, channels, OWNER, "ada@example.com", now=NOW)

    with pytest.raises(InvalidCodeError):
        verify_email(session, OWNER, "not-the-code", now=NOW)

    assert get_verified_email(session, OWNER) is None


def test_verified_code_cannot_be_reused(session, channels) -> None:
    record = set_email(session, channels, OWNER, "ada@example.com", now=NOW)
    verify_email(session, OWNER, record.verification_code, now=NOW)

    with pytest.raises(InvalidCodeError):
        verify_email(session, OWNER, record.verification_code, now=NOW)


def test_code_expires_after_three_days(session, channels) -> None:
    record = set_email(session, channels, OWNER, "ada@example.com", now=NOW)

    with pytest.raises(ExpiredError) as exc_info:
        verify_email(session, OWNER, record.verification_code, now=NOW + timedelta(days=3, seconds=1))

    assert exc_info.value.status_code == 400
    assert get_verified_email(session, OWNER) is None


def test_setting_a_new_address_invalidates_the_old_code(session, channels) -> None:
    first = set_email(session, channels, OWNER, "ada@example.com", now=NOW)
    verify_email(session, OWNER, first.verification_code, now=NOW)
    second = set_email(session, channels, OWNER, "grace@example.com", now=NOW)

    assert get_email_state(session, OWNER) is EmailState.PENDING
    with pytest.raises(InvalidCodeError):
        verify_email(session, OWNER, first.verification_code, now=NOW)

    verify_email(session, OWNER, second.verification_code, now=NOW)
    assert get_verified_email(session, OWNER) == "grace@example.com"


def test_verify_without_address(session) -> None:
    with pytest.raises(NotFoundError):
        verify_email(session, OWNER, "anything", now=NOW)


def test_corrupt_metadata_is_an_internal_error(session) -> None:
    KeyValueStore(session).put(
        f"EMAIL:{OWNER}",
        "ada@example.com",
        metadata={"verificationCode": "abc", "verificationSentAt": 1, "verifiedAt": 2},
    )

    with pytest.raises(InvalidMetadataError) as exc_info:
        verify_email(session, OWNER, "abc", now=NOW)

    assert exc_info.value.status_code == 500
    assert get_verified_email(session, OWNER) is None


@pytest.mark.parametrize("epoch", [10**20, -(10**20), float("nan"), float("inf")])
def test_out_of_range_timestamps_are_invalid_metadata(session, epoch) -> None:
    KeyValueStore(session).put(
        f"EMAIL:{OWNER}",
        "ada@example.com",
        metadata={"verificationCode": None, "verificationSentAt": epoch, "verifiedAt": epoch},
    )

    with pytest.raises(InvalidMetadataError):
        verify_email(session, OWNER, "abc", now=NOW)
    assert get_verified_email(session, OWNER) is None


@pytest.mark.parametrize("address", ["", "no-at-sign", "two@@example.com", "a@localhost", "a b@example.com"])
def test_invalid_addresses_are_rejected(session, channels, address) -> None:
    with pytest.raises(ValidationError):
        set_email(session, channels, OWNER, address, now=NOW)

    assert get_email_record(session, OWNER) is None


def test_mail_failure_keeps_the_pending_address(session, channels, mailer, caplog) -> None:
    mailer.failing.add("ada@example.com")

    with caplog.at_level("ERROR"):
        record = set_email(session, channels, OWNER, "ada@example.com", now=NOW)

    assert get_email_record(session, OWNER) == record
    assert "Error sending verification email" in caplog.text


def test_resend_only_reissues_pending_addresses(session, channels, mailer) -> None:
    assert resend_verification(session, channels, OWNER, now=NOW) is None

    first = set_email(session, channels, OWNER, "ada@example.com", now=NOW)
    reissued = resend_verification(session, channels, OWNER, now=NOW + timedelta(days=2))

    assert reissued is not None
    assert reissued.verification_code != first.verification_code
    assert len(mailer.sent) == 2

    verify_email(session, OWNER, reissued.verification_code, now=NOW + timedelta(days=4))
    assert resend_verification(session, channels, OWNER, now=NOW) is None
    assert len(mailer.sent) == 2


def test_clear_email(session, channels) -> None:
    set_email(session, channels, OWNER, "ada@example.com", now=NOW)
    clear_email(session, OWNER)

    assert get_email_state(session, OWNER) is EmailState.UNSET
