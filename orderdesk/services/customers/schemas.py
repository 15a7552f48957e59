"""API request/response schemas for customer endpoints."""

from pydantic import BaseModel, Field, field_validator


class CustomerCreate(BaseModel):
    """Body accepted by `POST /customer`."""

    name: str = Field(min_length=1, description="The customer's name")
    email: str = Field(min_length=1, description="The customer's email, unique across customers")
    address: str | None = Field(default=None, description="The customer's address")


class CustomerUpdate(BaseModel):
    """Partial update; only fields present in the body are written."""

    name: str | None = None
    email: str | None = None
    address: str | None = None

    @field_validator("name", "email")
    @classmethod
    def required_fields_not_null(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError("cannot be null")
        if not value:
            raise ValueError("cannot be empty")
        return value


class CustomerResponse(BaseModel):
    id: str = Field(description="The auto-generated ID of the customer")
    name: str
    email: str
    address: str | None = None
