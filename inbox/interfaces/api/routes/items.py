"""Feed endpoints: webhook ingest, listing and signed clearing."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from inbox.application.use_cases import (
    AuthorizedRequest,
    clear_feed_items,
    dispatch_event,
    list_feed_items,
)
from inbox.domain.entities import FeedItem, InboxEvent
from inbox.infrastructure.channels import DeliveryChannels
from inbox.infrastructure.database import get_db
from inbox.infrastructure.identity import address_to_identity, normalize_identity, resolve_identity
from inbox.interfaces.api.dependencies import (
    get_delivery_channels,
    require_signed_request,
    require_webhook_secret,
)
from inbox.interfaces.api.schemas import (
    AddItemBody,
    ItemsResponse,
    LoadedItemRead,
    SuccessResponse,
)

router = APIRouter(tags=["items"])
logger = logging.getLogger(__name__)


def _items_response(items: Sequence[FeedItem]) -> ItemsResponse:
    return ItemsResponse(
        items=[
            LoadedItemRead(
                id=item.id,
                timestamp=item.timestamp,
                chain_id=item.chain_id,
                data=item.data,
            )
            for item in items
        ]
    )


@router.post(
    "/add",
    response_model=SuccessResponse,
    dependencies=[Depends(require_webhook_secret)],
)
async def add_item(
    body: AddItemBody,
    public_key: str | None = Query(default=None, alias="publicKey"),
    bech32_address: str | None = Query(default=None, alias="bech32Address"),
    bech32_hash: str | None = Query(default=None, alias="bech32Hash"),
    db: Session = Depends(get_db),
    channels: DeliveryChannels = Depends(get_delivery_channels),
) -> SuccessResponse:
    """Record an indexer event and notify every channel that accepts it."""

    identity = resolve_identity(
        public_key=public_key, bech32_address=bech32_address, bech32_hash=bech32_hash
    )
    event = InboxEvent(type=body.type, data=body.data, chain_id=body.chain_id)
    await dispatch_event(db, channels, identity, event)
    return SuccessResponse()


@router.get("/load/{wallet_address}", response_model=ItemsResponse)
def load_items(
    wallet_address: str,
    item_type: str | None = Query(default=None, alias="type"),
    chain_id: str | None = Query(default=None, alias="chainId"),
    db: Session = Depends(get_db),
) -> ItemsResponse:
    identity = address_to_identity(wallet_address)
    return _items_response(
        list_feed_items(db, identity, item_type=item_type, chain_id=chain_id)
    )


@router.get("/load-bech32/{bech32_hash}", response_model=ItemsResponse)
def load_items_by_hash(
    bech32_hash: str,
    item_type: str | None = Query(default=None, alias="type"),
    chain_id: str | None = Query(default=None, alias="chainId"),
    db: Session = Depends(get_db),
) -> ItemsResponse:
    identity = normalize_identity(bech32_hash)
    return _items_response(
        list_feed_items(db, identity, item_type=item_type, chain_id=chain_id)
    )


@router.post("/clear", response_model=SuccessResponse)
def clear_items(
    authorized: AuthorizedRequest = Depends(require_signed_request),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    """Delete the listed items from the signer's feed."""

    clear_feed_items(db, authorized.identity, authorized.data.get("ids"))
    return SuccessResponse()
