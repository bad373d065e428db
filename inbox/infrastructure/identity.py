"""Conversions between public keys, bech32 addresses and canonical identities.

The canonical identity is the lowercase hex of the address bytes, i.e.
``ripemd160(sha256(compressed secp256k1 public key))``. It is the same for an
account on every chain, whatever bech32 prefix the chain uses.
"""

from __future__ import annotations

import hashlib

from bech32 import bech32_decode, bech32_encode, convertbits
from Crypto.Hash import RIPEMD160
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from inbox.domain.errors import ValidationError

# 20 bytes for accounts, 32 bytes for contracts.
IDENTITY_BYTE_LENGTHS = (20, 32)


def load_public_key(public_key_hex: str) -> ec.EllipticCurvePublicKey:
    """Decode a hex encoded secp256k1 public key (compressed or not)."""

    try:
        raw = bytes.fromhex(public_key_hex.strip())
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), raw)
    except (ValueError, TypeError) as exc:
        raise ValidationError("Invalid public key.") from exc


def public_key_to_identity(public_key_hex: str) -> str:
    compressed = load_public_key(public_key_hex).public_bytes(
        Encoding.X962, PublicFormat.CompressedPoint
    )
    digest = RIPEMD160.new(hashlib.sha256(compressed).digest())
    return digest.hexdigest()


def address_to_identity(address: str) -> str:
    prefix, words = bech32_decode(address.strip())
    if prefix is None or words is None:
        raise ValidationError("Invalid bech32 address.")
    data = convertbits(words, 5, 8, False)
    if data is None or len(data) not in IDENTITY_BYTE_LENGTHS:
        raise ValidationError("Invalid bech32 address.")
    return bytes(data).hex()


def normalize_identity(bech32_hash: str) -> str:
    value = bech32_hash.strip().lower()
    try:
        raw = bytes.fromhex(value)
    except ValueError as exc:
        raise ValidationError("Invalid bech32 hash.") from exc
    if len(raw) not in IDENTITY_BYTE_LENGTHS:
        raise ValidationError("Invalid bech32 hash.")
    return raw.hex()


def identity_to_address(identity: str, prefix: str) -> str:
    """Encode ``identity`` as a bech32 address with ``prefix``."""

    words = convertbits(bytes.fromhex(normalize_identity(identity)), 8, 5)
    address = bech32_encode(prefix, words) if words is not None else None
    if not address:
        raise ValidationError("Invalid bech32 prefix.")
    return address


def resolve_identity(
    *,
    public_key: str | None = None,
    bech32_address: str | None = None,
    bech32_hash: str | None = None,
) -> str:
    """Return the canonical identity from whichever representation is present."""

    if bech32_address:
        return address_to_identity(bech32_address)
    if public_key:
        return public_key_to_identity(public_key)
    if bech32_hash:
        return normalize_identity(bech32_hash)
    raise ValidationError("Invalid request query")


__all__ = [
    "address_to_identity",
    "identity_to_address",
    "load_public_key",
    "normalize_identity",
    "public_key_to_identity",
    "resolve_identity",
]
