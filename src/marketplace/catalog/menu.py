"""Read side of the catalog: a vendor's menu."""

from protean.utils.globals import current_domain

from marketplace.catalog.menu_item import MenuItem


def list_menu(vendor_id, available_only: bool = False) -> list[MenuItem]:
    filters = {"vendor_id": str(vendor_id)}
    if available_only:
        filters["is_available"] = True
    items = current_domain.repository_for(MenuItem)._dao.query.filter(**filters).all().items
    return sorted(items, key=lambda item: ((item.category or "").lower(), item.title.lower()))
