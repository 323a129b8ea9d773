# storefront/repos/cart_repo.py
import json

import redis

from storefront.domain.cart import CartStore
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CART_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartSessionRepo:
    """
    Keeps one CartStore per browsing session in Redis.

    The key expires CART_TTL_SECONDS after the last write, so an abandoned
    session cart disappears on its own.
    """

    def __init__(self, client: redis.Redis | None = None, ttl: int = CART_TTL_SECONDS):
        self.redis = client or redis.Redis.from_url(REDIS_URL, decode_responses=True)
        self.ttl = ttl

    @staticmethod
    def _key(session_id: str) -> str:
        return f"cart:{session_id}"

    @redis_retry()
    def load(self, session_id: str) -> CartStore:
        raw = self.redis.get(self._key(session_id))
        if not raw:
            return CartStore()
        try:
            return CartStore.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            # unreadable snapshot (e.g. schema changed between deploys): start over
            logger.warning(f"Dropping unreadable cart for session {session_id}: {e}")
            return CartStore()

    @redis_retry()
    def save(self, session_id: str, cart: CartStore):
        if cart.is_empty():
            self.redis.delete(self._key(session_id))
            return
        self.redis.set(self._key(session_id), json.dumps(cart.to_dict()), ex=self.ttl)

    @redis_retry()
    def delete(self, session_id: str):
        self.redis.delete(self._key(session_id))
