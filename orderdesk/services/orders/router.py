"""HTTP surface for orders, mounted at `/orders`."""

from fastapi import APIRouter, Depends, Request

from orderdesk.common.schemas import MessageResponse
from orderdesk.services.orders.schemas import OrderCreate, OrderResponse, PaymentResponse
from orderdesk.services.orders.service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

ERRORS_400 = {400: {"model": MessageResponse, "description": "Invalid request"}}


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


@router.post("", status_code=201, response_model=OrderResponse, responses=ERRORS_400, summary="Create a new order")
def create_order(req: OrderCreate, service: OrderService = Depends(get_order_service)):
    return service.create(req)


@router.get(
    "",
    response_model=list[OrderResponse],
    responses={500: {"model": MessageResponse, "description": "Server error"}},
    summary="Retrieve all orders",
)
def list_orders(service: OrderService = Depends(get_order_service)):
    return service.list_all()


@router.patch(
    "/{order_id}/cancel",
    response_model=OrderResponse | None,
    responses=ERRORS_400,
    summary="Cancel an order",
)
def cancel_order(order_id: str, service: OrderService = Depends(get_order_service)):
    """Set status to `cancelled` whatever the current status is."""

    return service.cancel(order_id)


@router.post(
    "/{order_id}/payment",
    response_model=PaymentResponse,
    responses={
        **ERRORS_400,
        503: {"model": MessageResponse, "description": "Settlement cancelled before completion"},
    },
    summary="Submit payment for an order",
)
async def submit_payment(order_id: str, request: Request, service: OrderService = Depends(get_order_service)):
    """Respond once the simulated settlement delay has passed and the order is paid."""

    order = await service.submit_payment(order_id, request.is_disconnected)
    return PaymentResponse(message="Payment submitted after delay", order=order)


@router.delete("/{order_id}", response_model=MessageResponse, responses=ERRORS_400, summary="Delete an order")
def delete_order(order_id: str, service: OrderService = Depends(get_order_service)):
    """Confirms even when no order had this id."""

    service.delete(order_id)
    return MessageResponse(message="Order deleted")
