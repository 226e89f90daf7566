"""Read side of the cart: lines grouped by vendor with derived totals."""

from marketplace.cart.lines import find_cart


def _line_dict(line) -> dict:
    return {
        "id": str(line.id),
        "vendor_id": str(line.vendor_id),
        "product_id": str(line.product_id),
        "title": line.title,
        "unit_price": line.unit_price,
        "quantity": line.quantity,
        "line_total": line.line_total,
    }


def list_lines(user_id) -> dict:
    cart = find_cart(user_id)
    if cart is None:
        return {"vendors": [], "total": 0.0, "item_count": 0}

    return {
        "vendors": [
            {
                "vendor_id": group["vendor_id"],
                "lines": [_line_dict(line) for line in group["lines"]],
                "subtotal": group["subtotal"],
            }
            for group in cart.grouped_by_vendor()
        ],
        "total": cart.total,
        "item_count": cart.item_count,
    }
