"""Signature verification for wallet-signed mutation requests.

Clients sign an ADR-36 "sign/MsgSignData" amino document whose ``data`` field
is the JSON-serialized request ``data`` (which embeds the ``auth`` block).
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Mapping, Protocol

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature

from inbox.domain.errors import AuthError, ValidationError
from inbox.infrastructure.identity import (
    identity_to_address,
    load_public_key,
    public_key_to_identity,
)

SIGNATURE_LENGTH = 64

# Amino JSON escapes these so signatures survive HTML embedding.
_AMINO_ESCAPES = {"&": "\\u0026", "<": "\\u003c", ">": "\\u003e"}


class SignatureVerifier(Protocol):
    """Verify ``signature`` over request ``data`` or raise :class:`AuthError`."""

    def verify(self, data: Mapping[str, Any], signature: str) -> None: ...


def serialize_request_data(data: Mapping[str, Any]) -> str:
    """Serialize ``data`` the way the signing client does (compact JSON)."""

    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def make_sign_doc(
    data: Mapping[str, Any], *, signer: str, chain_id: str, fee_denom: str
) -> dict[str, Any]:
    """Return the ADR-36 amino sign document covering ``data``."""

    encoded = base64.b64encode(serialize_request_data(data).encode("utf-8")).decode()
    return {
        "account_number": "0",
        "chain_id": chain_id,
        "fee": {"amount": [{"amount": "0", "denom": fee_denom}], "gas": "0"},
        "memo": "",
        "msgs": [
            {
                "type": "sign/MsgSignData",
                "value": {"data": encoded, "signer": signer},
            }
        ],
        "sequence": "0",
    }


def serialize_sign_doc(sign_doc: Mapping[str, Any]) -> bytes:
    """Sorted-key compact JSON with amino escaping, as bytes to sign."""

    serialized = json.dumps(
        sign_doc, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    for char, escaped in _AMINO_ESCAPES.items():
        serialized = serialized.replace(char, escaped)
    return serialized.encode("utf-8")


def decode_signature(signature: str) -> bytes:
    """Decode a base64 ``r || s`` secp256k1 signature."""

    try:
        raw = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise AuthError("Unauthorized. Invalid signature.") from exc
    if len(raw) != SIGNATURE_LENGTH:
        raise AuthError("Unauthorized. Invalid signature.")
    return raw


class Adr36SignatureVerifier:
    """secp256k1 ECDSA verification of ADR-36 signed request data."""

    def verify(self, data: Mapping[str, Any], signature: str) -> None:
        auth = data.get("auth")
        if not isinstance(auth, Mapping):
            raise ValidationError("Invalid auth body.")

        try:
            public_key_hex = str(auth["publicKey"])
            prefix = str(auth["chainBech32Prefix"])
            chain_id = str(auth["chainId"])
            fee_denom = str(auth["chainFeeDenom"])
        except KeyError as exc:
            raise ValidationError("Invalid auth body.") from exc

        try:
            public_key = load_public_key(public_key_hex)
            signer = identity_to_address(public_key_to_identity(public_key_hex), prefix)
        except ValidationError as exc:
            raise AuthError("Unauthorized. Invalid public key.") from exc

        message = serialize_sign_doc(
            make_sign_doc(data, signer=signer, chain_id=chain_id, fee_denom=fee_denom)
        )
        raw = decode_signature(signature)
        der_signature = encode_dss_signature(
            int.from_bytes(raw[:32], "big"), int.from_bytes(raw[32:], "big")
        )
        try:
            public_key.verify(der_signature, message, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature as exc:
            raise AuthError("Unauthorized. Invalid signature.") from exc


__all__ = [
    "Adr36SignatureVerifier",
    "SignatureVerifier",
    "decode_signature",
    "make_sign_doc",
    "serialize_request_data",
    "serialize_sign_doc",
]
