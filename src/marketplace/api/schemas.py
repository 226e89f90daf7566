"""Pydantic request/response schemas for the Marketplace API.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class SuccessResponse(CamelModel):
    success: bool = True


# --- Profiles ---


class RegisterProfileRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "role": "vendor",
                    "displayName": "Mama Ebi Kitchen",
                    "email": "kitchen@example.com",
                    "address": "12 Azikoro Road",
                    "location": "Azikoro",
                    "phone": "+2348030000000",
                }
            ]
        }
    }

    role: str = Field("user", max_length=20)
    display_name: str | None = Field(None, max_length=150)
    email: str | None = Field(None, max_length=254)
    address: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=30)
    subaccount_code: str | None = Field(None, max_length=100)


class UpdateProfileRequest(CamelModel):
    display_name: str | None = Field(None, max_length=150)
    email: str | None = Field(None, max_length=254)
    address: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=30)
    subaccount_code: str | None = Field(None, max_length=100)


class SetAvailabilityRequest(CamelModel):
    is_available: bool


class ChangeRoleRequest(CamelModel):
    role: str = Field(..., max_length=20)


class ReviewRiderRequest(CamelModel):
    approval_status: str = Field(..., max_length=20)


class ProfileSchema(CamelModel):
    id: str
    role: str
    display_name: str | None = None
    email: str | None = None
    address: str | None = None
    location: str | None = None
    phone: str | None = None
    subaccount_code: str | None = None
    is_available: bool = False
    approval_status: str | None = None


class ProfileResponse(SuccessResponse):
    profile: ProfileSchema


# --- Catalog ---


class CreateMenuItemRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Jollof Rice",
                    "description": "Smoky party jollof with fried plantain.",
                    "price": 2500.0,
                    "category": "Rice",
                    "isAvailable": True,
                }
            ]
        }
    }

    vendor_id: str | None = None
    title: str = Field(..., max_length=200)
    description: str | None = None
    price: float = Field(..., ge=0)
    category: str | None = Field(None, max_length=100)
    is_available: bool = True
    image_url: str | None = Field(None, max_length=1000)


class UpdateMenuItemRequest(CamelModel):
    title: str | None = Field(None, max_length=200)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)
    is_available: bool | None = None
    image_url: str | None = Field(None, max_length=1000)


class MenuItemSchema(CamelModel):
    id: str
    vendor_id: str
    title: str
    description: str | None = None
    price: float
    category: str | None = None
    is_available: bool = True
    image_url: str | None = None


class MenuItemIdResponse(SuccessResponse):
    menu_item_id: str


class MenuResponse(SuccessResponse):
    vendor_id: str
    items: list[MenuItemSchema]


# --- Cart ---


class AddCartLineRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "vendorId": "vendor-001",
                    "productId": "menu-item-001",
                    "quantity": 2,
                }
            ]
        }
    }

    vendor_id: str
    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartLineRequest(CamelModel):
    quantity: int


class CartLineSchema(CamelModel):
    id: str
    vendor_id: str
    product_id: str
    title: str | None = None
    unit_price: float
    quantity: int
    line_total: float


class CartVendorGroupSchema(CamelModel):
    vendor_id: str
    lines: list[CartLineSchema]
    subtotal: float


class CartSchema(CamelModel):
    vendors: list[CartVendorGroupSchema]
    total: float
    item_count: int


class CartResponse(SuccessResponse):
    cart: CartSchema


class CartLineIdResponse(SuccessResponse):
    line_id: str


# --- Checkout ---


class CheckoutRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "deliveryLandmark": "Amarata",
                    "deliveryAddress": "4 Hospital Road",
                    "deliveryCity": "Yenagoa",
                    "deliveryState": "Bayelsa",
                    "deliveryPhone": "+2348030000000",
                }
            ]
        }
    }

    delivery_landmark: str | None = Field(None, max_length=100)
    delivery_address: str | None = Field(None, max_length=500)
    delivery_city: str | None = Field(None, max_length=100)
    delivery_state: str | None = Field(None, max_length=100)
    delivery_phone: str | None = Field(None, max_length=30)
    payment_reference: str | None = Field(None, max_length=100)


class CheckoutResponse(SuccessResponse):
    checkout_batch_id: str
    order_ids: list[str]
    total: float


class CalculateDeliveryRequest(CamelModel):
    delivery_landmark: str = Field(..., max_length=100)


class DeliveryFeeResponse(SuccessResponse):
    landmark: str
    zone: int
    fee: float


class LandmarkSchema(CamelModel):
    name: str
    zone: int
    fee: float


class LandmarksResponse(SuccessResponse):
    landmarks: list[LandmarkSchema]


# --- Orders ---


class UpdateOrderStatusRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "orderId": "order-001",
                    "vendorId": "vendor-001",
                    "newStatus": "Accepted",
                    "expectedStatus": "Paid",
                }
            ]
        }
    }

    order_id: str
    vendor_id: str
    new_status: str = Field(..., max_length=20)
    expected_status: str | None = Field(None, max_length=20)
    reason: str | None = Field(None, max_length=500)


class CancelOrderRequest(CamelModel):
    expected_status: str | None = Field(None, max_length=20)
    reason: str | None = Field(None, max_length=500)


class SetDeliveryDetailsRequest(CamelModel):
    delivery_landmark: str | None = Field(None, max_length=100)
    delivery_address: str = Field(..., max_length=500)
    delivery_city: str | None = Field(None, max_length=100)
    delivery_state: str | None = Field(None, max_length=100)
    delivery_phone: str | None = Field(None, max_length=30)


class OrderStatusResponse(SuccessResponse):
    order_id: str
    status: str


class DeliveryDetailsSchema(CamelModel):
    landmark: str | None = None
    zone: int | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    phone: str | None = None


class OrderSchema(CamelModel):
    id: str
    checkout_batch_id: str
    user_id: str
    vendor_id: str
    product_id: str
    product_title: str | None = None
    quantity: int
    unit_price: float
    subtotal: float
    delivery_fee: float
    total: float
    status: str
    payment_reference: str | None = None
    delivery: DeliveryDetailsSchema | None = None
    cancellation_reason: str | None = None
    cancelled_by: str | None = None


class OrderResponse(SuccessResponse):
    order: OrderSchema


class OrderListResponse(SuccessResponse):
    orders: list[OrderSchema]


class BatchResponse(SuccessResponse):
    checkout_batch_id: str
    orders: list[OrderSchema]
    total: float


# --- Delivery tasks ---


class CreateDeliveryTaskRequest(CamelModel):
    order_id: str
    vendor_id: str


class UpdateDeliveryStatusRequest(CamelModel):
    new_status: str = Field(..., max_length=20)


class DeliveryTaskRefSchema(CamelModel):
    id: str
    order_id: str
    status: str


class DeliveryTaskRefResponse(SuccessResponse):
    delivery_task: DeliveryTaskRefSchema


class DeliveryTaskSchema(CamelModel):
    id: str
    order_id: str
    vendor_id: str
    user_id: str
    rider_id: str | None = None
    vendor_location: str | None = None
    pickup_address: str | None = None
    delivery_address: str
    delivery_phone: str | None = None
    payment_reference: str | None = None
    pickup_sequence: int | None = None
    status: str


class DeliveryTaskListResponse(SuccessResponse):
    delivery_tasks: list[DeliveryTaskSchema]


# --- Payments ---


class InitializePaymentRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "checkoutBatchId": "5b7d0f1e-8c1a-4c0e-9a55-6f1b2f5a9e10",
                    "email": "buyer@example.com",
                    "callbackUrl": "https://app.example.com/payments/done",
                }
            ]
        }
    }

    checkout_batch_id: str | None = None
    delivery_landmark: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=254)
    callback_url: str | None = Field(None, max_length=1000)


class InitializePaymentResponse(SuccessResponse):
    reference: str
    authorization_url: str | None = None
    amount: float


class WebhookResponse(SuccessResponse):
    outcome: str
    orders_paid: int = 0


# --- Notifications ---


class NotificationSchema(CamelModel):
    id: str
    notification_type: str
    title: str
    message: str
    is_read: bool
    context: dict = Field(default_factory=dict)


class NotificationListResponse(SuccessResponse):
    notifications: list[NotificationSchema]
    unread_count: int


class MarkAllReadResponse(SuccessResponse):
    updated: int
