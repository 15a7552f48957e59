"""HTTP surface for customer records, mounted at `/customer`."""

from fastapi import APIRouter, Depends, Request

from orderdesk.common.schemas import MessageResponse
from orderdesk.services.customers.schemas import (
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
)
from orderdesk.services.customers.service import CustomerService

router = APIRouter(prefix="/customer", tags=["Customers"])

ERRORS_400 = {400: {"model": MessageResponse, "description": "Bad request"}}
ERRORS_500 = {500: {"model": MessageResponse, "description": "Server error"}}


def get_customer_service(request: Request) -> CustomerService:
    return request.app.state.customer_service


@router.post(
    "",
    status_code=201,
    response_model=CustomerResponse,
    response_model_exclude_none=True,
    responses=ERRORS_400,
    summary="Create a new customer",
)
def create_customer(req: CustomerCreate, service: CustomerService = Depends(get_customer_service)):
    return service.create(req)


@router.get(
    "",
    response_model=list[CustomerResponse],
    response_model_exclude_none=True,
    responses=ERRORS_500,
    summary="Retrieve all customers",
)
def list_customers(service: CustomerService = Depends(get_customer_service)):
    return service.list_all()


@router.patch(
    "/{customer_id}",
    response_model=CustomerResponse | None,
    response_model_exclude_none=True,
    responses=ERRORS_400,
    summary="Update a customer's details",
)
def update_customer(
    customer_id: str,
    req: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service),
):
    """Returns `null` when no customer has this id."""

    return service.update_partial(customer_id, req)


@router.delete(
    "/{customer_id}",
    response_model=MessageResponse,
    responses=ERRORS_400,
    summary="Delete a customer",
)
def delete_customer(customer_id: str, service: CustomerService = Depends(get_customer_service)):
    """Confirms even when no customer had this id."""

    service.delete(customer_id)
    return MessageResponse(message="Customer deleted")
