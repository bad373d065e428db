"""Profile directory client used to expand an identity into linked identities."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from inbox.config import Settings
from inbox.domain.errors import ValidationError
from inbox.infrastructure.identity import (
    address_to_identity,
    normalize_identity,
    public_key_to_identity,
)

logger = logging.getLogger(__name__)


class ProfileDirectory:
    """Resolve every identity attached to the same profile.

    The directory answers ``GET {base_url}/bech32/{identity}`` with a profile
    whose ``chains`` map each chain id to ``{address, publicKey: {hex}}``.
    """

    def __init__(self, base_url: str | None, client: httpx.AsyncClient | None = None) -> None:
        self._base_url = base_url.rstrip("/") if base_url else None
        self._client = client

    async def expand(self, identity: str) -> set[str]:
        """Return ``identity`` plus its linked identities; never raises."""

        if not self._base_url or self._client is None:
            return {identity}

        try:
            response = await self._client.get(f"{self._base_url}/bech32/{identity}")
            response.raise_for_status()
            profile = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Profile directory lookup failed for %s: %s", identity, exc)
            return {identity}

        linked = _identities_from_profile(profile)
        if linked is None:
            logger.warning("Malformed profile directory response for %s", identity)
            return {identity}
        return linked | {identity}


def _identities_from_profile(profile: Any) -> set[str] | None:
    if not isinstance(profile, dict):
        return None
    chains = profile.get("chains")
    if chains is None:
        return set()
    if not isinstance(chains, dict):
        return None

    identities: set[str] = set()
    for chain in chains.values():
        if not isinstance(chain, dict):
            continue
        try:
            identities.add(_identity_from_chain(chain))
        except ValidationError:
            continue
    return identities


def _identity_from_chain(chain: dict[str, Any]) -> str:
    address = chain.get("address")
    if isinstance(address, str) and address:
        return address_to_identity(address)
    public_key = chain.get("publicKey")
    if isinstance(public_key, dict) and isinstance(public_key.get("hex"), str):
        return public_key_to_identity(public_key["hex"])
    bech32_hash = chain.get("bech32Hash")
    if isinstance(bech32_hash, str):
        return normalize_identity(bech32_hash)
    raise ValidationError("Profile chain carries no identity")


def build_profile_directory(settings: Settings, client: httpx.AsyncClient) -> ProfileDirectory:
    if not settings.profile_directory_url:
        logger.info("Profile directory not configured; recipients are not expanded")
    return ProfileDirectory(settings.profile_directory_url, client)


__all__ = ["ProfileDirectory", "build_profile_directory"]
