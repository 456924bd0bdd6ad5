"""Merchant record returned by the merchant directory API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Merchant(BaseModel):
    """A merchant location.

    Only ``id`` and ``name`` are required; fields the server adds later are
    kept as extras rather than rejected.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    timezone: Optional[str] = None
    is_active: bool = Field(default=True, alias="isActive")
