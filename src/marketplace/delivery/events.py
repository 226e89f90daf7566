"""Domain events for the DeliveryTask aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="DeliveryTask")
class DeliveryTaskCreated:
    """A vendor dispatched an order; riders can now pick the task up."""

    __version__ = 1

    delivery_task_id = Identifier(required=True)
    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    user_id = Identifier(required=True)
    pickup_address = String(max_length=500)
    delivery_address = String(max_length=500)
    created_at = DateTime(required=True)


@marketplace.event(part_of="DeliveryTask")
class DeliveryTaskAssigned:
    __version__ = 1

    delivery_task_id = Identifier(required=True)
    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rider_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@marketplace.event(part_of="DeliveryTask")
class DeliveryTaskPickedUp:
    __version__ = 1

    delivery_task_id = Identifier(required=True)
    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rider_id = Identifier(required=True)
    picked_up_at = DateTime(required=True)


@marketplace.event(part_of="DeliveryTask")
class DeliveryTaskInTransit:
    __version__ = 1

    delivery_task_id = Identifier(required=True)
    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rider_id = Identifier(required=True)
    in_transit_at = DateTime(required=True)


@marketplace.event(part_of="DeliveryTask")
class DeliveryTaskDelivered:
    __version__ = 1

    delivery_task_id = Identifier(required=True)
    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rider_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@marketplace.event(part_of="DeliveryTask")
class DeliveryTaskCancelled:
    """The task's order was cancelled or rejected before delivery."""

    __version__ = 1

    delivery_task_id = Identifier(required=True)
    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rider_id = Identifier()
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)
