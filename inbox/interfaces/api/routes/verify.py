"""Standalone email verification link target."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from inbox.application.use_cases import verify_email
from inbox.domain.errors import ValidationError
from inbox.infrastructure.database import get_db
from inbox.infrastructure.identity import address_to_identity
from inbox.interfaces.api.schemas import SuccessResponse

router = APIRouter(tags=["verify"])


@router.get("/verify/{wallet_address}/{code}", response_model=SuccessResponse)
def verify(
    wallet_address: str,
    code: str,
    email: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    if not email:
        raise ValidationError("Missing email.")

    verify_email(db, address_to_identity(wallet_address), code)
    return SuccessResponse()
