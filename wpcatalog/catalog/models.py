"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for upstream records and canonical catalog items.

- RawProduct: one record as returned by the WooCommerce products endpoint
- Product: canonical catalog entry served by the API
- SearchRecord: lightweight listing record

Products keep the JSON keys existing clients already consume
(``productID``, ``demoLink``, ``demo-url`` ...) through field aliases.

==============================================================================
"""

import enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductType(str, enum.Enum):
    """Classification of a product."""

    THEME = "theme"
    PLUGIN = "plugin"


class Partition(str, enum.Enum):
    """Names of the three partition stores."""

    ALL = "all"
    THEMES = "themes"
    PLUGINS = "plugins"

    @classmethod
    def from_query(cls, value: Optional[str]) -> "Partition":
        """
        Resolve a user supplied partition name.

        ``theme``/``themes`` and ``plugin``/``plugins`` select a type
        partition; anything else selects the all-items store.
        """
        normalized = (value or "").strip().lower()
        if normalized in ("theme", "themes"):
            return cls.THEMES
        if normalized in ("plugin", "plugins"):
            return cls.PLUGINS
        return cls.ALL


# =============================================================================
# UPSTREAM RECORD
# =============================================================================

def _text(value: Any) -> str:
    """Coerce an optional upstream scalar to text."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class RawMeta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Upstream keys are not guaranteed to be strings; odd keys never match
    key: Any = None
    value: Any = None


class RawImage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    src: str = ""

    @field_validator("src", mode="before")
    @classmethod
    def coerce_src(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class RawTerm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    slug: str = ""

    @field_validator("name", "slug", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _text(value)


class RawProduct(BaseModel):
    """
    Upstream WooCommerce product record.

    Only ``id`` and ``name`` are required; every other attribute falls back
    to an empty value so partially filled records still normalize.
    """

    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    name: str = Field(..., min_length=1)
    description: str = ""
    permalink: str = ""
    date_modified_gmt: Optional[str] = None
    price: Any = None
    regular_price: Any = None
    sale_price: Any = None
    meta_data: List[RawMeta] = Field(default_factory=list)
    images: List[RawImage] = Field(default_factory=list)
    categories: List[RawTerm] = Field(default_factory=list)
    tags: List[RawTerm] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: Union[int, str]) -> Union[int, str]:
        if isinstance(value, str) and not value.strip():
            raise ValueError("id must not be blank")
        return value

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value

    @field_validator("description", "permalink", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("date_modified_gmt", mode="before")
    @classmethod
    def coerce_timestamp(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    @field_validator("meta_data", "images", "categories", "tags", mode="before")
    @classmethod
    def drop_malformed_entries(cls, value: Any) -> List[Any]:
        """Keep only object entries; a malformed entry never rejects the record."""
        if not isinstance(value, list):
            return []
        return [entry for entry in value if isinstance(entry, dict)]


# =============================================================================
# CANONICAL PRODUCT
# =============================================================================

class Category(BaseModel):
    """Category reference kept on a product."""

    name: str
    slug: str


class Product(BaseModel):
    """
    Canonical catalog entry.

    Attributes:
        product_id: Upstream identifier (``productID``)
        name: Display name
        version: ``product-version`` metadata value
        image: First image URL or empty string
        categories: Ordered category references
        tags: Ordered tag names
        type: Classification, None when the product is unclassified
    """

    model_config = ConfigDict(populate_by_name=True)

    product_id: Union[int, str] = Field(..., alias="productID")
    name: str = Field(..., min_length=1)
    version: Any = None
    image: str = ""
    description: str = ""
    permalink: str = ""
    demo_link: Any = Field(default=None, alias="demoLink")
    last_update: Optional[str] = Field(default=None, alias="lastUpdate")
    free: Any = None
    brand: Any = None
    developer: Any = None
    demo_url: Any = Field(default=None, alias="demo-url")
    dev_url: Any = Field(default=None, alias="dev-url")
    popular: Any = None
    price: Any = None
    regular_price: Any = None
    sale_price: Any = None
    categories: List[Category] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    type: Optional[ProductType] = None

    @property
    def key(self) -> str:
        """Store key for this product."""
        return str(self.product_id)

    @property
    def category_slugs(self) -> List[str]:
        return [category.slug for category in self.categories]

    def to_json(self) -> dict:
        """Serialize with the public JSON keys."""
        return self.model_dump(by_alias=True, mode="json")

    def to_record(self) -> "SearchRecord":
        """Project to the lightweight listing record."""
        return SearchRecord(
            product_id=self.product_id,
            name=self.name,
            description=self.description,
            type=self.type,
            image=self.image,
        )


class SearchRecord(BaseModel):
    """Lightweight record used by the default listing."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: Union[int, str] = Field(..., alias="productID")
    name: str
    description: str = ""
    type: Optional[ProductType] = None
    image: str = ""

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
