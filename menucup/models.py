"""
SQLAlchemy Database Models

Relational layout for the multi-tenant menu builder:
- Restaurants with branding fields (owned by one user)
- Menu categories (slug unique per restaurant)
- Menu items (category must belong to the same restaurant)
- Profiles (role per auth identity)

Author: Khalil Bannouri
Version: 1.0.0
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Float, DateTime, Text, Enum, Boolean, Integer,
    ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from menucup.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_values(enum_cls) -> list[str]:
    # Store enum values ("visual"), not member names ("VISUAL")
    return [member.value for member in enum_cls]


class Appearance(str, enum.Enum):
    """Public page styling mode."""
    MINIMAL = "minimal"
    VISUAL = "visual"


class ProfileRole(str, enum.Enum):
    """Role of an auth identity."""
    ADMIN = "admin"
    OWNER = "owner"


# Branding defaults applied to new restaurants
DEFAULT_BRANDING = {
    "appearance": Appearance.MINIMAL,
    "accent_color": "#6366f1",
    "background_color": "#ffffff",
    "card_bg_color": "#ffffff",
    "text_color": "#000000",
    "muted_text_color": "#6b7280",
}


class Restaurant(Base):
    """
    A tenant: one restaurant, one owner, one public menu.

    The slug is globally unique and is the public URL segment.
    """
    __tablename__ = "restaurants"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(120), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    owner_id = Column(String(36), nullable=False, index=True)

    # =========================================================================
    # BRANDING
    # =========================================================================
    logo_url = Column(String(500), nullable=True)
    appearance = Column(
        Enum(Appearance, values_callable=_enum_values),
        default=DEFAULT_BRANDING["appearance"],
        nullable=False,
    )
    background_color = Column(String(20), default=DEFAULT_BRANDING["background_color"])
    accent_color = Column(String(20), default=DEFAULT_BRANDING["accent_color"])
    card_bg_color = Column(String(20), default=DEFAULT_BRANDING["card_bg_color"])
    text_color = Column(String(20), default=DEFAULT_BRANDING["text_color"])
    muted_text_color = Column(String(20), default=DEFAULT_BRANDING["muted_text_color"])
    background_image_url = Column(String(500), nullable=True)
    qr_code_url = Column(String(500), nullable=True)

    # =========================================================================
    # DESCRIPTIVE TEXT
    # =========================================================================
    subtitle = Column(String(200), nullable=True)
    slogan = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    est_year = Column(String(10), nullable=True)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=_utcnow)

    categories = relationship(
        "MenuCategory",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Restaurant {self.slug} - owner {self.owner_id}>"


class MenuCategory(Base):
    """A named group of items within one restaurant."""
    __tablename__ = "menu_categories"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "slug", name="uq_menu_categories_restaurant_slug"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    restaurant_id = Column(
        String(36),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(120), nullable=False)
    slug = Column(String(120), nullable=False)
    order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=_utcnow)

    restaurant = relationship("Restaurant", back_populates="categories")
    items = relationship(
        "MenuItem",
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<MenuCategory {self.slug} #{self.order}>"


class MenuItem(Base):
    """A dish or drink shown on the menu."""
    __tablename__ = "menu_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    restaurant_id = Column(
        String(36),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = Column(
        String(36),
        ForeignKey("menu_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    image_url = Column(String(500), nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=_utcnow)

    category = relationship("MenuCategory", back_populates="items")

    def __repr__(self):
        return f"<MenuItem {self.name} - {self.price:.2f}>"


class Profile(Base):
    """
    Role assignment for an auth identity.

    The id matches the user id issued by the auth provider. Users
    without a row are owners.
    """
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)
    role = Column(
        Enum(ProfileRole, values_callable=_enum_values),
        default=ProfileRole.OWNER,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<Profile {self.id} - {self.role.value}>"
