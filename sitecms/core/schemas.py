"""Response schemas shared across modules."""

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Acknowledgement body for deletes and other side-effect-only calls."""

    success: bool = True
