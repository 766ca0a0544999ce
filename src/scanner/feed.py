"""Candidate token feeds.

The scan loop pulls one observation per tick from a ``TokenFeed``. A live
deployment would back this with a market-data API client; the simulated
feed generates plausible pump-style tokens around the active policy bounds.
"""

import random
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime

import base58

from src.scanner.exceptions import FeedError
from src.scanner.models import AssetObservation, Policy, SecuritySnapshot

TOKEN_NAMES = (
    "PEPE2.0", "BONK", "DOGWIFHAT", "SAMO", "COPE", "ROPE",
    "HODL", "MOON", "ROCKET", "DEGEN", "WOJAK", "CHAD",
    "BASED", "GIGA", "SIGMA", "ALPHA", "MEME", "SHIB2",
)


class TokenFeed(ABC):
    @abstractmethod
    async def next(self) -> AssetObservation:
        """Return the next candidate observation. Raises FeedError on failure."""


class SimulatedFeed(TokenFeed):
    """Random token generator for demos and tests.

    Market values are drawn just above the policy minimums so that most
    tokens land inside the configured window; security flags fail at
    roughly the rates seen on fresh launches.
    """

    def __init__(
        self,
        *,
        policy_source: Callable[[], Policy] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._policy_source = policy_source or Policy
        self._rng = rng or random.Random()
        self._generated = 0

    @property
    def generated(self) -> int:
        return self._generated

    def _address(self) -> str:
        # 32-byte pubkey, base58 like a real SPL mint
        return base58.b58encode(self._rng.randbytes(32)).decode()

    async def next(self) -> AssetObservation:
        try:
            policy = self._policy_source()
        except Exception as e:
            raise FeedError(f"Cannot read policy bounds: {e}") from e

        rng = self._rng
        min_cap = policy.min_cap or 0.0
        max_cap = policy.max_cap if policy.max_cap is not None else min_cap + 10000.0
        name = rng.choice(TOKEN_NAMES)

        observation = AssetObservation(
            address=self._address(),
            name=name,
            symbol=name[:4].upper(),
            market_cap=min_cap + rng.random() * (max_cap - min_cap),
            volume_24h=(policy.min_volume or 0.0) + rng.random() * 20000,
            liquidity=(policy.min_liquidity or 0.0) + rng.random() * 10000,
            price_change_24h=-10 + rng.random() * 40,
            holders=int(100 + rng.random() * 900),
            security=SecuritySnapshot(
                liquidity_locked=rng.random() > 0.3,
                mint_disabled=rng.random() > 0.2,
                freeze_disabled=rng.random() > 0.25,
                top10_holders_pct=15 + rng.random() * 40,
                contract_age_hours=rng.random() * 48,
            ),
            timestamp=datetime.now(UTC).replace(tzinfo=None),
        )
        self._generated += 1
        return observation
