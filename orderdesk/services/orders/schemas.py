"""API request/response schemas for order endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from orderdesk.common.state_machine import OrderStatus


class OrderItem(BaseModel):
    """One line item. Values are stored as given, never checked against `total`."""

    product: str | None = Field(default=None, description="The name of the product")
    quantity: int | float | None = Field(default=None, description="Quantity of the product")
    price: int | float | None = Field(default=None, description="Price per unit")


class OrderCreate(BaseModel):
    """Body accepted by `POST /orders`.

    `customerId` is a weak reference: any non-empty string is stored without
    checking that the customer exists.
    """

    customerId: str = Field(min_length=1, description="ID of the customer placing the order")
    items: list[OrderItem]
    total: int | float = Field(description="Total price of the order, supplied by the caller")
    status: OrderStatus = OrderStatus.PENDING


class OrderResponse(BaseModel):
    id: str = Field(description="The auto-generated ID of the order")
    customerId: str
    items: list[OrderItem]
    total: int | float
    status: OrderStatus
    createdAt: datetime


class PaymentResponse(BaseModel):
    message: str
    order: OrderResponse | None = None
