"""Schemas for wallet-signed requests."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class AuthBlock(BaseModel):
    """Signer details embedded in the signed ``data``."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    nonce: StrictInt = Field(..., ge=0)
    chain_id: str = Field(..., alias="chainId")
    chain_fee_denom: str = Field(..., alias="chainFeeDenom")
    chain_bech32_prefix: str = Field(..., alias="chainBech32Prefix")
    public_key: str = Field(..., alias="publicKey")


class SignedData(BaseModel):
    model_config = ConfigDict(extra="allow")

    auth: AuthBlock


class SignedRequest(BaseModel):
    data: SignedData
    signature: str = Field(..., min_length=1)


class NonceResponse(BaseModel):
    nonce: int


__all__ = ["AuthBlock", "NonceResponse", "SignedData", "SignedRequest"]
