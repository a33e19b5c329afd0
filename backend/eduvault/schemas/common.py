from __future__ import annotations
from pydantic import BaseModel


class Envelope(BaseModel):
    """Shape shared by every JSON response: {success, message, ...data}."""
    success: bool = True
    message: str | None = None


class MessageResponse(Envelope):
    pass
