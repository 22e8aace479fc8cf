# storefront/services/change_events.py
"""
Zdarzenia "encja sie zmienila" dla warstwy cache.

Serwisy nie dotykaja cache bezposrednio, publikuja tylko zdarzenie po
udanym commicie. Warstwa cache subskrybuje kanal Redis i uniewaznia
swoje wpisy.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import redis
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from redis.exceptions import RedisError

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CHANGE_EVENTS_CHANNEL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ChangeKind(str, Enum):
    CART_CHANGED = "cart.changed"
    STOCK_CHANGED = "product.stock_changed"
    ORDER_CREATED = "order.created"
    ORDER_UPDATED = "order.updated"


class ChangeEvent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    kind: ChangeKind
    entity_id: str
    owner_id: Optional[int] = None
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChangePublisher:
    """Publikuje ChangeEvent jako JSON na kanale Redis pub/sub."""

    def __init__(self, url: str | None = None, channel: str | None = None):
        self.redis = redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.channel = channel or CHANGE_EVENTS_CHANNEL

    @redis_retry()
    def _publish(self, payload: str) -> int:
        return self.redis.publish(self.channel, payload)

    def publish(self, event: ChangeEvent) -> None:
        payload = event.model_dump_json(by_alias=True)
        try:
            receivers = self._publish(payload)
            logger.info(f"Published {event.kind.value} for {event.entity_id} to {receivers} subscriber(s)")
        except RedisError as e:
            # dane juz zapisane, cache wygasnie sam po TTL
            logger.warning(f"Failed to publish {event.kind.value} for {event.entity_id}: {e}")


def cart_changed(cart_id: int, user_id: int) -> ChangeEvent:
    return ChangeEvent(kind=ChangeKind.CART_CHANGED, entity_id=str(cart_id), owner_id=user_id)


def stock_changed(product_id: int) -> ChangeEvent:
    return ChangeEvent(kind=ChangeKind.STOCK_CHANGED, entity_id=str(product_id))


def order_created(order_id: int, user_id: int) -> ChangeEvent:
    return ChangeEvent(kind=ChangeKind.ORDER_CREATED, entity_id=str(order_id), owner_id=user_id)


def order_updated(order_id: int, user_id: int) -> ChangeEvent:
    return ChangeEvent(kind=ChangeKind.ORDER_UPDATED, entity_id=str(order_id), owner_id=user_id)
