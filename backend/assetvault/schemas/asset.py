"""
AssetVault Backend — Asset Request/Response Schemas
=====================================================

What:  Pydantic models defining the asset API contract.
Why:   These models ARE the declarative validation rules: every field
       constraint (type, enum membership, nested element shape) lives here,
       and the validation service turns their errors into violation lists.
How:   Request models are validated by `assetvault.services.validation`
       (not by FastAPI directly) so that every failure is reported as a
       400 with field paths. Response models shape what the API returns.

Field rules (shared by create and update):
    title, description      JSON strings
    images[]                {url: str, height: number, width: number, type?: str}
    type                    one of AssetType values
    tags[]                  {name: str, path: str}
    category                one of AssetCategory values

Update mode keeps every rule above; it only makes fields optional and adds
"at least one field" and "no nulls" checks.
"""

import math
from typing import Annotated, Any, List, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictStr,
    field_validator,
    model_validator,
)

from assetvault.models.asset import AssetCategory, AssetType


def _require_number(value: Any) -> Any:
    # bool is an int subclass; JSON true/false are not numbers
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Input should be a valid number")
    # NaN, Infinity and overflowed literals like 1e400 have no JSON form
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Input should be a finite number")
    return value


Number = Annotated[Union[int, float], BeforeValidator(_require_number)]


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what clients send
# ══════════════════════════════════════════════════════════════════════════


class ImageIn(BaseModel):
    """One preview image. `type` is optional but must be a string when sent."""

    url: StrictStr
    height: Number
    width: Number
    type: Optional[StrictStr] = None

    @field_validator("type", mode="before")
    @classmethod
    def reject_null_type(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Input should be a valid string")
        return v


class TagIn(BaseModel):
    name: StrictStr
    path: StrictStr


class AssetCreate(BaseModel):
    """
    What:  Body of POST /api/v1/assets.
    Why:   Every top-level field is required; id and addedAt are server-set
           and ignored if sent.
    """

    title: StrictStr
    description: StrictStr
    images: List[ImageIn]
    type: AssetType
    tags: List[TagIn]
    category: AssetCategory


class AssetUpdate(BaseModel):
    """
    What:  Body of PATCH /api/v1/assets/{id}.
    How:   Any nonempty subset of the mutable fields. Present fields obey the
           same rules as AssetCreate; an explicit null is rejected because a
           PATCH only ever sets values.
    """

    title: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    images: Optional[List[ImageIn]] = None
    type: Optional[AssetType] = None
    tags: Optional[List[TagIn]] = None
    category: Optional[AssetCategory] = None

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Defaults are not validated, so this only fires for an explicit null
        if v is None:
            raise ValueError("Field may not be null")
        return v

    @model_validator(mode="after")
    def require_one_field(self) -> "AssetUpdate":
        if not self.model_fields_set:
            fields = ", ".join(type(self).model_fields)
            raise ValueError(f"At least one of {fields} must be provided")
        return self


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class ImageResponse(BaseModel):
    url: str
    height: Union[int, float]
    width: Union[int, float]
    type: Optional[str] = None


class TagResponse(BaseModel):
    name: str
    path: str


class AssetResponse(BaseModel):
    """
    What:  Full representation of a stored asset.
    Who:   Returned by every asset route except DELETE.

    `added_at` serializes as `addedAt` to keep the public field name.
    """

    id: str = Field(description="Opaque asset identifier")
    title: str
    description: str
    images: List[ImageResponse]
    type: AssetType
    tags: List[TagResponse]
    category: AssetCategory
    added_at: int = Field(alias="addedAt", description="Creation time (epoch milliseconds)")

    model_config = ConfigDict(populate_by_name=True)


class DeleteResponse(BaseModel):
    message: str = Field(default="Asset deleted")
    id: str
