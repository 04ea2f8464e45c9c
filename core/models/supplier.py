# =============================================================================
# core/models/supplier.py - Supplier Registration Schemas
# =============================================================================
# These models define the API contract for supplier registration:
# - SupplierSubmission: the form payload, validated field by field
# - ProductImages / *Catalog: the multi-file slot and the catalog variants
# - SupplierRecord: the row persisted in the suppliers table
# - SubmissionResponse / FormOptionsResponse: what the API returns
#
# Wire names are camelCase (as sent by the web form); Python attributes are
# snake_case. All strings are trimmed before any rule is checked.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# Reference Data
# =============================================================================

CATEGORIES: tuple[str, ...] = (
    "חומרי גלם יבשים",
    "ירקות, ירוקים, פירות",
    "בשר, עוף, דגים",
    "גבינות וחלב",
    "משקאות, מיצים, שייקים",
    "קפה ותה",
    "אלכוהול, יין, בירות",
    "קונדיטוריה, אפייה, גלידה",
    "לחמים ומאפים",
    "מתוקים וקינוחים",
    "מוצרי מעדניה",
    "אוכל מוכן וקייטרינג",
    "כלי אריזה וחומרי ניקוי",
    "ציוד מטבח ובר",
    "כלי בית",
    "אחר",
)

ACTIVITY_AREAS: tuple[str, ...] = ("צפון", "מרכז", "דרום", "שפלה", "כל הארץ")

# Cardinality bounds for categories / activity areas
MAX_SELECTIONS = 20

DEFAULT_MAX_PRODUCT_IMAGES = 10

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class _FormModel(BaseModel):
    """Base for models parsed from the registration form."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# Validation Output
# =============================================================================

class FieldError(BaseModel):
    """
    One violated field.

    Example:
        {"field": "email", "label": "אימייל", "message": "Invalid email address"}
    """

    field: str = Field(..., description="Field path in the submitted payload")
    label: str = Field(..., description="Display label for the field")
    message: str = Field(..., description="What is wrong with the value")


# =============================================================================
# File Slots
# =============================================================================

class ProductImages(_FormModel):
    """
    Product image slot: parallel arrays of data URLs and original filenames.

    Example:
        {
            "files": ["data:image/png;base64,iVBOR...", "data:image/jpeg;base64,/9j/..."],
            "fileNames": ["cake.png", "bread.jpg"]
        }
    """

    files: list[str] = Field(default_factory=list)
    file_names: list[Annotated[str, Field(max_length=255)]] = Field(default_factory=list)

    @field_validator("files")
    @classmethod
    def _cap_image_count(cls, files: list[str], info: ValidationInfo) -> list[str]:
        limit = (info.context or {}).get("max_product_images", DEFAULT_MAX_PRODUCT_IMAGES)
        if len(files) > limit:
            raise ValueError(f"Too many product images (max {limit})")
        return files

    @model_validator(mode="after")
    def _arrays_match(self) -> "ProductImages":
        if len(self.files) != len(self.file_names):
            raise ValueError("files and fileNames must have the same length")
        return self


class TextCatalog(_FormModel):
    """Catalog given as free text."""

    type: Literal["text"]
    text: str = Field(..., min_length=1, max_length=5000)


class FileCatalog(_FormModel):
    """Catalog uploaded as an image or PDF."""

    type: Literal["file"]
    file: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1, max_length=255)


class DriveLinkCatalog(_FormModel):
    """Catalog shared as an external link (e.g. Google Drive)."""

    type: Literal["drive-link"]
    link: str = Field(..., min_length=1, max_length=500, pattern=r"^https?://\S+$")


ProductCatalog = Annotated[
    Union[TextCatalog, FileCatalog, DriveLinkCatalog],
    Field(discriminator="type"),
]

CATALOG_TYPES: tuple[str, ...] = ("text", "file", "drive-link")


# =============================================================================
# Submission
# =============================================================================

class SupplierSubmission(_FormModel):
    """
    A supplier registration as sent by the public form.

    Required: businessName, contactName, phone, email, about, categories,
    activityAreas, mainAddress. Everything else is optional.

    Example:
        {
            "businessName": "מאפיית הכרמל",
            "contactName": "Dana Levi",
            "phone": "050-1234567",
            "email": "dana@example.com",
            "about": "Artisan bakery",
            "categories": ["לחמים ומאפים"],
            "activityAreas": ["צפון"],
            "mainAddress": "Haifa",
            "productCatalog": {"type": "drive-link", "link": "https://drive.google.com/..."}
        }
    """

    business_name: str = Field(..., min_length=1, max_length=200)
    company_id: str | None = Field(default=None, max_length=50)
    contact_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=20)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    about: str = Field(..., min_length=1, max_length=2000)
    categories: list[str] = Field(..., min_length=1, max_length=MAX_SELECTIONS)
    activity_areas: list[str] = Field(..., min_length=1, max_length=MAX_SELECTIONS)
    website: str | None = Field(default=None, max_length=500)
    instagram: str | None = Field(default=None, max_length=500)
    main_address: str = Field(..., min_length=1, max_length=500)

    logo_file: str | None = None
    logo_file_name: str | None = Field(default=None, max_length=255)
    product_images: ProductImages | None = None
    product_catalog: ProductCatalog | None = None

    @field_validator("categories")
    @classmethod
    def _known_categories(cls, values: list[str]) -> list[str]:
        unknown = [v for v in values if v not in CATEGORIES]
        if unknown:
            raise ValueError(f"Unknown category: {unknown[0]}")
        return values

    @field_validator("activity_areas")
    @classmethod
    def _known_activity_areas(cls, values: list[str]) -> list[str]:
        unknown = [v for v in values if v not in ACTIVITY_AREAS]
        if unknown:
            raise ValueError(f"Unknown activity area: {unknown[0]}")
        return values


# =============================================================================
# Persistence
# =============================================================================

class SupplierStatus(str, Enum):
    """
    Moderation state of a supplier.

    New registrations always start as pending; moderation happens elsewhere.
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SupplierRecord(BaseModel):
    """
    Row written to the suppliers table.

    `id` and `created_at` are filled in by the database.
    """

    id: UUID | None = None
    created_at: datetime | None = None

    business_name: str
    company_id: str | None = None
    contact_name: str
    phone: str
    email: str
    about: str
    categories: list[str]
    activity_areas: list[str]
    website: str | None = None
    instagram: str | None = None
    main_address: str

    logo_url: str | None = None
    product_images_url: list[str] | None = None
    product_catalog_type: str | None = None
    product_catalog_text: str | None = None
    product_catalog_url: str | None = None

    status: SupplierStatus = SupplierStatus.PENDING

    def to_row(self) -> dict:
        """Columns to insert; database-generated fields are left out."""
        return self.model_dump(mode="json", exclude={"id", "created_at"})


# =============================================================================
# API Responses
# =============================================================================

class SubmissionResponse(BaseModel):
    """Returned by POST /submit-supplier when the registration is saved."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str = "Supplier registered successfully"
    supplier_id: str


class FormOptionsResponse(BaseModel):
    """Choices and limits the registration form should enforce."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    categories: list[str]
    activity_areas: list[str]
    image_types: list[str]
    catalog_types: list[str]
    catalog_file_types: list[str]
    max_file_size_mb: int
    max_product_images: int
