"""Response bodies shared by both resources."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """`{message}` body used for confirmations and every error."""

    message: str
