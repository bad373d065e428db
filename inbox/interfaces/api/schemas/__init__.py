from .auth import AuthBlock, NonceResponse, SignedData, SignedRequest
from .config import (
    ConfigData,
    ConfigResponse,
    PushKeyAction,
    PushSubscribeAction,
    PushUnsubscribeAllAction,
)
from .items import AddItemBody, ItemsResponse, LoadedItemRead, SuccessResponse

__all__ = [
    "AddItemBody",
    "AuthBlock",
    "ConfigData",
    "ConfigResponse",
    "ItemsResponse",
    "LoadedItemRead",
    "NonceResponse",
    "PushKeyAction",
    "PushSubscribeAction",
    "PushUnsubscribeAllAction",
    "SignedData",
    "SignedRequest",
    "SuccessResponse",
]
