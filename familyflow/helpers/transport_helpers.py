# File: helpers/transport_helpers.py
"""Simulated transport for the FamilyFlow service facade.

Every call waits a random, uniformly distributed delay to emulate a network
round trip, and selected read paths may fail with a synthetic INTERNAL
error. Both are driven by TransportSettings so tests can switch them off.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
import random
from typing import Any

import voluptuous as vol

from .. import const


def _check_delay_window(options: dict[str, Any]) -> dict[str, Any]:
    """Reject a window whose minimum exceeds its maximum."""
    if options[const.CONF_MIN_DELAY_MS] > options[const.CONF_MAX_DELAY_MS]:
        raise vol.Invalid(
            f"{const.CONF_MIN_DELAY_MS} must not exceed {const.CONF_MAX_DELAY_MS}"
        )
    return options


TRANSPORT_OPTIONS_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Optional(
                const.CONF_MIN_DELAY_MS, default=const.DEFAULT_MIN_DELAY_MS
            ): vol.All(vol.Coerce(int), vol.Range(min=0)),
            vol.Optional(
                const.CONF_MAX_DELAY_MS, default=const.DEFAULT_MAX_DELAY_MS
            ): vol.All(vol.Coerce(int), vol.Range(min=0)),
            vol.Optional(
                const.CONF_FAILURE_RATE, default=const.DEFAULT_FAILURE_RATE
            ): vol.All(vol.Coerce(float), vol.Range(min=0.0, max=1.0)),
        }
    ),
    _check_delay_window,
)


@dataclass(frozen=True)
class TransportSettings:
    """Latency window and fault rate for the simulated transport.

    Attributes:
        min_delay_ms: Shortest simulated round trip
        max_delay_ms: Longest simulated round trip
        failure_rate: Probability that a fault-injecting read fails
    """

    min_delay_ms: int = const.DEFAULT_MIN_DELAY_MS
    max_delay_ms: int = const.DEFAULT_MAX_DELAY_MS
    failure_rate: float = const.DEFAULT_FAILURE_RATE

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> TransportSettings:
        """Build settings from an options mapping.

        Missing keys fall back to the defaults.

        Raises:
            vol.Invalid: If any option is out of range
        """
        validated = TRANSPORT_OPTIONS_SCHEMA(dict(options or {}))
        return cls(
            min_delay_ms=validated[const.CONF_MIN_DELAY_MS],
            max_delay_ms=validated[const.CONF_MAX_DELAY_MS],
            failure_rate=validated[const.CONF_FAILURE_RATE],
        )

    @classmethod
    def instant(cls) -> TransportSettings:
        """Return zero-delay, zero-fault settings."""
        return cls(min_delay_ms=0, max_delay_ms=0, failure_rate=0.0)


class SimulatedTransport:
    """Applies latency and fault injection for one service instance."""

    def __init__(
        self,
        settings: TransportSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            settings: Latency and fault settings (defaults if omitted)
            rng: Random source; pass a seeded instance for repeatable draws
        """
        self.settings = settings or TransportSettings()
        self._rng = rng or random.Random()

    def next_delay(self) -> float:
        """Draw the next round-trip delay in seconds."""
        delay_ms = self._rng.randint(
            self.settings.min_delay_ms, self.settings.max_delay_ms
        )
        return delay_ms / 1000

    async def round_trip(self) -> None:
        """Wait one simulated round trip."""
        delay = self.next_delay()
        if delay > 0:
            await asyncio.sleep(delay)

    def should_fail(self, action: str) -> bool:
        """Decide whether this call fails with a synthetic INTERNAL error."""
        if self.settings.failure_rate <= 0:
            return False
        if self._rng.random() < self.settings.failure_rate:
            const.LOGGER.warning(
                "WARNING: %s: Injected transient transport failure", action
            )
            return True
        return False
