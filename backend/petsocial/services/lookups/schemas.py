"""
Lookup DTOs and the API response envelope.

DTOs carry only display fields, never the raw entity. JSON uses camelCase
aliases; names are accepted on input as well.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...constants import MAX_ENTITY_ID, MAX_SORT_ORDER

T = TypeVar("T")


class LookupDto(BaseModel):
    """Base for cached lookup items."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    id: int
    name: str


class PetTypeDto(LookupDto):
    image_path: Optional[str] = None


class BreedDto(LookupDto):
    pass


class ColorDto(LookupDto):
    pass


class PetFoodDto(LookupDto):
    pass


class UserTypeDto(LookupDto):
    image_path: Optional[str] = None
    description: Optional[str] = None


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope shared by every lookup and admin endpoint."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: bool
    status_code: int
    message: str
    data: Optional[T] = None

    @classmethod
    def success(
        cls, data: T, message: str = "Success", status_code: int = 200
    ) -> "ApiResponse[T]":
        return cls(status=True, status_code=status_code, message=message, data=data)

    @classmethod
    def fail(
        cls, message: str, status_code: int = 400, data: Optional[T] = None
    ) -> "ApiResponse[T]":
        return cls(status=False, status_code=status_code, message=message, data=data)


class LookupWrite(BaseModel):
    """Admin create/update payload for any lookup table."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(default="", max_length=100)
    sort_order: int = Field(default=0, ge=0, le=MAX_SORT_ORDER)
    image_path: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = None
    pet_type_id: Optional[int] = Field(
        default=None, ge=1, le=MAX_ENTITY_ID, description="Breeds only"
    )
