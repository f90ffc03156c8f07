"""
AssetVault Backend — Asset SQLAlchemy Model
=============================================

What:  ORM model representing the `assets` table, plus the closed enums for
       the `type` and `category` fields.
Why:   Maps asset documents to rows for type-safe database operations.
Who:   Used by AssetStore for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - id: Opaque UUID4 string generated by the service (exact-match lookups)
    - images / tags: JSON columns; each array is always replaced whole
    - type / category: Stored by enum value ("3D Asset", "UE4"), not by member name
    - added_at: Epoch milliseconds set once by the server on creation
"""

import copy
import enum
from typing import Any, Dict, List

from sqlalchemy import JSON, BigInteger, Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from assetvault.database import Base


class AssetType(str, enum.Enum):
    """Closed set of asset kinds."""

    PLUGIN = "Plugin"
    MODEL_3D = "3D Asset"
    SPRITE_2D = "2D Asset"
    SFX = "SFX"
    VFX = "VFX"
    OTHER = "Other"


class AssetCategory(str, enum.Enum):
    """Closed set of engine/category buckets."""

    UE4 = "UE4"
    UNITY = "Unity"
    MISC = "Misc"
    GENERAL = "General"


def _enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


class Asset(Base):
    """
    A single downloadable asset.

    Lifecycle:
        1. Created by POST /api/v1/assets with a fresh id and added_at
        2. Mutated only through PATCH (flattened "set these fields" document)
        3. Removed only by whole-record DELETE
    """

    __tablename__ = "assets"

    # Document field name → ORM attribute for every field a PATCH may set
    MUTABLE_FIELDS = {
        "title": "title",
        "description": "description",
        "images": "images",
        "type": "type",
        "tags": "tags",
        "category": "category",
    }

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Opaque unique identifier (UUID4 string)",
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    # [{url, height, width, type?}, ...]
    images: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    type: Mapped[AssetType] = mapped_column(
        Enum(
            AssetType,
            name="asset_type",
            native_enum=False,
            length=32,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )

    # [{name, path}, ...]
    tags: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    category: Mapped[AssetCategory] = mapped_column(
        Enum(
            AssetCategory,
            name="asset_category",
            native_enum=False,
            length=32,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )

    added_at: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Creation time in epoch milliseconds (server-set)",
    )

    __table_args__ = (
        Index("idx_assets_added_at", "added_at"),
    )

    def to_document(self) -> Dict[str, Any]:
        """
        Return the asset as a plain JSON-ready document.

        Arrays are deep-copied so callers can modify the document without
        touching ORM state (change detection relies on attribute assignment).
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "images": copy.deepcopy(self.images),
            "type": AssetType(self.type).value,
            "tags": copy.deepcopy(self.tags),
            "category": AssetCategory(self.category).value,
            "addedAt": self.added_at,
        }

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, title='{self.title}', type='{self.type}')>"
