"""
Cart Value Poller - watches a storefront cart and reports its subtotal

Polls the storefront's /cart.js on a fixed interval and pushes changed totals
to PUT /api/cart-sessions/{token}/value. Runs as an APScheduler job so it can
be stopped deterministically when the shopping session ends.
"""
from decimal import Decimal
from typing import Optional
import logging

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from cartrewards.core import settings

logger = logging.getLogger(__name__)


class CartValuePoller:
    """
    Reports one storefront cart to the rewards backend.

    Fixed interval, no backoff: a failed tick is logged and the next tick
    simply tries again.
    """

    def __init__(
        self,
        storefront_url: str,
        backend_url: str,
        cart_token: str,
        store_id: Optional[str] = None,
        interval_seconds: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.storefront_url = storefront_url.rstrip("/")
        self.backend_url = backend_url.rstrip("/")
        self.cart_token = cart_token
        self.store_id = store_id
        self.interval_seconds = interval_seconds or settings.CART_POLL_INTERVAL_SECONDS
        self.client = client or httpx.AsyncClient(timeout=10.0)
        self.last_value: Optional[Decimal] = None
        self.scheduler: Optional[AsyncIOScheduler] = None

    @property
    def job_id(self) -> str:
        return f"cart_poll_{self.cart_token}"

    @property
    def is_running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    async def fetch_cart_total(self) -> Decimal:
        """Cart subtotal from /cart.js; total_price is in minor units"""
        response = await self.client.get(f"{self.storefront_url}/cart.js")
        response.raise_for_status()
        total_minor = int(response.json().get("total_price", 0))
        return Decimal(total_minor).scaleb(-2)

    async def _register_session(self):
        response = await self.client.post(
            f"{self.backend_url}/api/cart-sessions",
            json={"storeId": self.store_id, "cartToken": self.cart_token},
        )
        response.raise_for_status()
        logger.info(f"Registered cart session {self.cart_token}")

    async def push_cart_value(self, value: Decimal) -> dict:
        """Send the new total; registers the session first if the backend has not seen it"""
        url = f"{self.backend_url}/api/cart-sessions/{self.cart_token}/value"
        payload = {"currentValue": str(value)}

        response = await self.client.put(url, json=payload)
        if response.status_code == 404 and self.store_id:
            await self._register_session()
            response = await self.client.put(url, json=payload)
        response.raise_for_status()
        return response.json()

    async def poll_once(self) -> Optional[dict]:
        """One tick: returns the backend response when the total changed, else None"""
        try:
            total = await self.fetch_cart_total()
            if total == self.last_value:
                return None

            result = await self.push_cart_value(total)
            self.last_value = total
            if result.get("newMilestones"):
                logger.info(f"Cart {self.cart_token} unlocked new milestones at {total}")
            return result
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Cart poll failed for {self.cart_token}: {e}")
            return None

    def start(self):
        """Start polling; must be called from inside a running event loop"""
        if self.is_running:
            return
        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            func=self.poll_once,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=self.job_id,
            name=f"Poll cart {self.cart_token}",
            replace_existing=True,
            max_instances=1,  # a slow tick must not overlap the next one
        )
        self.scheduler.start()
        logger.info(f"Cart poller started for {self.cart_token} every {self.interval_seconds}s")

    def stop(self):
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            logger.info(f"Cart poller stopped for {self.cart_token}")
        self.scheduler = None

    async def aclose(self):
        """Stop polling and release the HTTP client"""
        self.stop()
        await self.client.aclose()
