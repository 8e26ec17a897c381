# AKCM Direct-Call Actuator
# Changes item state through an HTTP endpoint instead of the page

from __future__ import annotations

from types import TracebackType
from typing import Optional

import httpx

from akcm.adapters.base import ActuationStyle
from akcm.config.schema import DirectCallConfig
from akcm.reconcile.errors import DiscoveryError, PermanentRemoteError, RateLimitedError, TransientRemoteError
from akcm.reconcile.item import Item
from akcm.reconcile.outcome import AttemptOutcome

RATE_LIMIT_STATUS = 429


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Parse a Retry-After header given in seconds.

    HTTP-date values are ignored; the backoff schedule applies instead.
    """
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


class DirectCallActuator:
    """
    Fire-and-trust actuator backed by an HTTP endpoint.

    There is no indicator to poll afterwards, so a 2xx response counts as
    success. Failures are raised as exceptions and mapped to outcomes by the
    engine.
    """

    style = ActuationStyle.FIRE_AND_TRUST
    max_concurrency: Optional[int] = None

    def __init__(self, config: DirectCallConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize actuator.

        Args:
            config: Endpoint template, method and headers.
            client: Pre-built client. One is created and owned otherwise.

        Raises:
            ValueError: If no endpoint is configured.
        """
        if not config.endpoint:
            raise ValueError("Direct-call actuation needs direct_call.endpoint")
        self.config = config
        self.endpoint: str = config.endpoint
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers=config.headers,
            timeout=config.timeout_seconds,
        )

    async def __aenter__(self) -> DirectCallActuator:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this actuator created it."""
        if self._owns_client:
            await self._client.aclose()

    def build_url(self, item: Item, desired: bool) -> str:
        """Fill the endpoint template for one item."""
        return self.endpoint.format(item_id=item.item_id, state="enable" if desired else "disable")

    async def actuate(self, item: Item, desired: bool) -> AttemptOutcome:
        """
        Send one state-change request.

        Raises:
            DiscoveryError: Item has no id to address.
            RateLimitedError: HTTP 429.
            TransientRemoteError: 5xx or transport failure.
            PermanentRemoteError: Any other non-2xx status.
        """
        if not item.item_id:
            raise DiscoveryError(f"No item id for {item.label}")

        try:
            response = await self._client.request(
                self.config.method,
                self.build_url(item, desired),
                json={"itemId": item.item_id, "enabled": desired},
            )
        except httpx.TransportError as e:
            raise TransientRemoteError(f"{type(e).__name__}: {e}") from e

        status = response.status_code
        if response.is_success:
            return AttemptOutcome.success()
        if status == RATE_LIMIT_STATUS:
            raise RateLimitedError(
                "rate limited (HTTP 429)",
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )
        if status >= 500:
            raise TransientRemoteError(
                f"server error (HTTP {status})",
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )
        raise PermanentRemoteError(f"rejected (HTTP {status})")
