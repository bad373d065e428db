"""Expose the next nonce a signer must use."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inbox.application.use_cases import get_expected_nonce
from inbox.infrastructure.database import get_db
from inbox.infrastructure.identity import public_key_to_identity
from inbox.interfaces.api.schemas import NonceResponse

router = APIRouter(tags=["auth"])


@router.get("/nonce/{public_key}", response_model=NonceResponse)
def get_nonce(public_key: str, db: Session = Depends(get_db)) -> NonceResponse:
    return NonceResponse(nonce=get_expected_nonce(db, public_key_to_identity(public_key)))
