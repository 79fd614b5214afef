"""
Pydantic Schemas for Request/Response Validation

Covers:
- Restaurant, category and item payloads for the JSON API
- Menu-builder actions (moves, reorders, settings)
- Lead form and health responses

Author: Khalil Bannouri
Version: 1.0.0
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, EmailStr
from typing import Optional, List, Any
from datetime import datetime
from enum import Enum


HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


# =============================================================================
# ENUMS
# =============================================================================

class AppearanceEnum(str, Enum):
    MINIMAL = "minimal"
    VISUAL = "visual"


class MoveDirection(str, Enum):
    UP = "up"
    DOWN = "down"


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RestaurantCreate(BaseModel):
    """Request schema for creating a restaurant."""
    name: str = Field(..., min_length=1, max_length=120, examples=["Joe's Bar"])
    slug: Optional[str] = Field(None, max_length=120, examples=["joes-bar"])

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class CategoryCreate(BaseModel):
    """Request schema for creating a category."""
    name: str = Field(..., min_length=1, max_length=120, examples=["Cocktails"])
    slug: Optional[str] = Field(None, max_length=120, examples=["cocktails"])
    order: Optional[int] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class CategoryUpdate(BaseModel):
    name: str = Field(..., max_length=120)


class ItemCreate(BaseModel):
    """Request schema for creating a menu item."""
    name: str = Field(..., min_length=1, max_length=120, examples=["Mojito"])
    description: Optional[str] = Field(None, max_length=1000)
    price: float = Field(..., ge=0, examples=[9.5])
    image_url: Optional[str] = Field(None, max_length=500)
    is_available: bool = True
    order: int = Field(default=0, ge=0)
    category_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class ItemUpdate(BaseModel):
    """Partial update; only supplied fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)
    is_available: Optional[bool] = None
    category_id: Optional[str] = None


class RestaurantSettingsUpdate(BaseModel):
    """Branding and descriptive fields editable from the settings panel."""
    est_year: Optional[str] = Field(None, max_length=10)
    subtitle: Optional[str] = Field(None, max_length=200)
    slogan: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    appearance: AppearanceEnum = AppearanceEnum.MINIMAL
    background_color: str = Field(default="#ffffff", pattern=HEX_COLOR_PATTERN)
    accent_color: str = Field(default="#6366f1", pattern=HEX_COLOR_PATTERN)
    card_bg_color: str = Field(default="#ffffff", pattern=HEX_COLOR_PATTERN)
    text_color: str = Field(default="#000000", pattern=HEX_COLOR_PATTERN)
    muted_text_color: str = Field(default="#6b7280", pattern=HEX_COLOR_PATTERN)


class MoveRequest(BaseModel):
    index: int = Field(..., ge=0)
    direction: MoveDirection


class ReorderRequest(BaseModel):
    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


class LeadRequest(BaseModel):
    """Demo request submitted from the landing page."""
    full_name: str = Field(..., min_length=1, max_length=120, alias="fullName")
    email: EmailStr
    company_name: str = Field(..., min_length=1, max_length=200, alias="companyName")

    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class RestaurantResponse(BaseModel):
    """Response schema for a single restaurant."""
    id: str
    name: str
    slug: str
    owner_id: str
    logo_url: Optional[str]
    appearance: str
    background_color: Optional[str]
    accent_color: Optional[str]
    card_bg_color: Optional[str]
    text_color: Optional[str]
    muted_text_color: Optional[str]
    background_image_url: Optional[str]
    qr_code_url: Optional[str]
    subtitle: Optional[str]
    slogan: Optional[str]
    description: Optional[str]
    est_year: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)

    @field_validator("appearance", mode="before")
    @classmethod
    def enum_value(cls, v: Any) -> str:
        return getattr(v, "value", v)


class CategoryResponse(BaseModel):
    id: str
    restaurant_id: str
    name: str
    slug: str
    order: int
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class ItemResponse(BaseModel):
    id: str
    restaurant_id: str
    category_id: str
    name: str
    description: Optional[str]
    price: float
    image_url: Optional[str]
    is_available: bool
    order: int
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class MenuSnapshot(BaseModel):
    """Current menu-builder view for one restaurant."""
    restaurant: RestaurantResponse
    categories: List[CategoryResponse]
    items: List[ItemResponse]
    filtered_items: List[ItemResponse]
    search_term: str
    active_filter: str
    order_dirty: bool = False


class ActionResponse(BaseModel):
    """Outcome of a menu-builder action."""
    status: str
    success: bool
    error: Optional[str] = None
    data: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str


class LeadResponse(BaseModel):
    success: bool


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    auth_service: str
    storage_service: str
    email_service: str
    timestamp: datetime
