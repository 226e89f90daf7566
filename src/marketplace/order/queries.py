"""Read side of orders, scoped to what the caller may see."""

from marketplace.errors import NotFound
from marketplace.identity.policy import is_allowed
from marketplace.identity.profile import Profile, Role
from marketplace.order.lookup import get_order, orders_where
from marketplace.order.order import Order


def orders_visible_to(actor: Profile, status: str | None = None) -> list[Order]:
    """Users see what they ordered, vendors what they sell, admins everything."""
    filters = {"status": status} if status else {}
    if actor.has_role(Role.ADMIN):
        return orders_where(**filters)
    if actor.has_role(Role.VENDOR):
        return orders_where(vendor_id=str(actor.id), **filters)
    return orders_where(user_id=str(actor.id), **filters)


def order_visible_to(actor: Profile, order_id) -> Order:
    order = get_order(order_id)
    if not (is_allowed(actor, "order.view", order.user_id) or is_allowed(actor, "order.view", order.vendor_id)):
        # Hide the existence of other people's orders
        raise NotFound(f"Order {order_id} not found", order_id=str(order_id))
    return order


def batch_visible_to(actor: Profile, checkout_batch_id) -> list[Order]:
    orders = orders_where(checkout_batch_id=str(checkout_batch_id))
    if not actor.has_role(Role.ADMIN):
        orders = [order for order in orders if str(order.user_id) == str(actor.id)]
    if not orders:
        raise NotFound(f"Checkout batch {checkout_batch_id} not found", checkout_batch_id=str(checkout_batch_id))
    return sorted(orders, key=lambda o: (str(o.vendor_id), o.created_at.timestamp() if o.created_at else 0.0))
