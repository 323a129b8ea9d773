# storefront/services/cart_service.py
from redis.exceptions import RedisError

from storefront.domain.cart import CartStore
from storefront.domain.errors import BackendError, ValidationError
from storefront.domain.pricing import display_amount
from storefront.domain.schemas import CheckoutIn, OrderSubmitIn, OrderItemIn
from storefront.repos.cart_repo import CartSessionRepo
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CART_UNAVAILABLE = "سبد خرید در دسترس نیست، لطفا دوباره تلاش کنید"


class CartService:
    """
    Use cases for a session cart.

    Every command loads the session's CartStore, mutates it and writes it back.
    The store itself knows nothing about inventory or persistence.
    """

    def __init__(self, repo: CartSessionRepo, catalog: CatalogService, orders: OrderService | None = None):
        self.repo = repo
        self.catalog = catalog
        self.orders = orders

    def _load(self, session_id: str) -> CartStore:
        try:
            return self.repo.load(session_id)
        except RedisError as e:
            logger.error(f"Cart load failed for session {session_id}: {e}")
            raise BackendError(CART_UNAVAILABLE, detail=str(e)) from e

    def _save(self, session_id: str, cart: CartStore):
        try:
            self.repo.save(session_id, cart)
        except RedisError as e:
            logger.error(f"Cart save failed for session {session_id}: {e}")
            raise BackendError(CART_UNAVAILABLE, detail=str(e)) from e

    @staticmethod
    def view(session_id: str, cart: CartStore) -> dict:
        total = cart.total_price
        return {
            "session_id": session_id,
            "items": [
                {
                    "product": line.product,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "line_total": line.line_total,
                }
                for line in cart.items
            ],
            "item_count": cart.item_count,
            "total_price": total,
            "total_display": display_amount(total),
        }

    # =====================================================
    # QUERY
    # =====================================================
    def get_cart(self, session_id: str) -> dict:
        return self.view(session_id, self._load(session_id))

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_product(self, session_id: str, product_id: int, quantity: int = 1) -> dict:
        """
        Use Case: add to cart.

        The product page's stock rule is applied here: the requested quantity
        may not exceed the product's inventory when inventory is known.
        """
        if quantity < 1:
            raise ValidationError("تعداد باید حداقل ۱ باشد")

        product = self.catalog.get_product(product_id)
        if product.inventory is not None and product.inventory < quantity:
            if product.inventory == 0:
                raise ValidationError("این محصول ناموجود است")
            raise ValidationError(f"تنها {product.inventory} عدد از این محصول موجود است.")

        cart = self._load(session_id)
        cart.add(product, quantity)
        self._save(session_id, cart)
        logger.info(f"Session {session_id}: added {quantity} x product {product_id}")
        return self.view(session_id, cart)

    def update_quantity(self, session_id: str, product_id: int, quantity: int) -> dict:
        cart = self._load(session_id)
        cart.update_quantity(product_id, quantity)
        self._save(session_id, cart)
        return self.view(session_id, cart)

    def remove_product(self, session_id: str, product_id: int) -> dict:
        cart = self._load(session_id)
        cart.remove(product_id)
        self._save(session_id, cart)
        return self.view(session_id, cart)

    def clear(self, session_id: str) -> dict:
        try:
            self.repo.delete(session_id)
        except RedisError as e:
            logger.error(f"Cart clear failed for session {session_id}: {e}")
            raise BackendError(CART_UNAVAILABLE, detail=str(e)) from e
        return self.view(session_id, CartStore())

    def checkout(self, session_id: str, shipping: CheckoutIn, token: str | None) -> dict:
        """
        Use Case: submit the session cart as an order.

        Line prices are the discounted unit prices the shopper saw. The cart is
        cleared only after the order was stored. Once stored, the order is
        reported as placed even if clearing the cart fails.
        """
        cart = self._load(session_id)
        payload = OrderSubmitIn(
            phone=shipping.phone,
            postal_code=shipping.postal_code,
            address=shipping.address,
            items=[OrderItemIn(**item) for item in cart.to_order_items()],
        )
        result = self.orders.place_order(payload, token)

        cart.clear()
        try:
            self._save(session_id, cart)
        except BackendError as e:
            logger.warning(
                f"Order {result['order_id']} placed but cart for session {session_id} was not cleared: {e.detail}"
            )
        return result
