"""Order lookups shared by handlers and the read side."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.errors import NotFound
from marketplace.order.order import Order


def get_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        raise NotFound(f"Order {order_id} not found", order_id=str(order_id)) from None


def orders_where(**filters) -> list[Order]:
    orders = current_domain.repository_for(Order)._dao.query.filter(**filters).all().items
    return sorted(orders, key=lambda o: o.created_at.timestamp() if o.created_at else 0.0, reverse=True)
