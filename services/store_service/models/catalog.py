"""Store catalog models: stores, taxonomy, specifications, products, variants."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.enums import MediaType, enum_values
from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# STORE
# ============================================================================


class Store(Base):
    """A tenant storefront managed from the admin dashboard."""

    __tablename__ = "stores"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<Store {self.name}>"


# ============================================================================
# TAXONOMY
# ============================================================================


class Category(Base):
    """Top-level product categories (e.g., 'Electronics', 'Apparel')."""

    __tablename__ = "store_categories"
    __table_args__ = (
        UniqueConstraint("store_id", "slug", name="uq_category_store_slug"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    banner_image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    billboard_label: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    classification: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    sub_categories = relationship(
        "SubCategory", back_populates="category", passive_deletes=True
    )
    products = relationship("Product", back_populates="category", passive_deletes=True)

    def __repr__(self):
        return f"<Category {self.name}>"


class SubCategory(Base):
    """Subcategories; ``parent_id`` nests them into a tree under one category."""

    __tablename__ = "store_subcategories"
    __table_args__ = (
        UniqueConstraint("store_id", "slug", name="uq_subcategory_store_slug"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("store_categories.id"), nullable=False, index=True
    )
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("store_subcategories.id", ondelete="SET NULL"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    banner_image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    category = relationship("Category", back_populates="sub_categories")
    parent = relationship("SubCategory", remote_side=[id], back_populates="children")
    children = relationship("SubCategory", back_populates="parent", passive_deletes=True)
    products = relationship(
        "Product", back_populates="sub_category", passive_deletes=True
    )

    def __repr__(self):
        return f"<SubCategory {self.name}>"


class Brand(Base):
    """Product brands."""

    __tablename__ = "store_brands"
    __table_args__ = (UniqueConstraint("store_id", "slug", name="uq_brand_store_slug"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    products = relationship("Product", back_populates="brand", passive_deletes=True)

    def __repr__(self):
        return f"<Brand {self.name}>"


class Size(Base):
    __tablename__ = "store_sizes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    value: Mapped[str] = mapped_column(String(50), nullable=False)


class Color(Base):
    __tablename__ = "store_colors"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    value: Mapped[str] = mapped_column(String(20), nullable=False)  # hex code


# ============================================================================
# SPECIFICATIONS
# ============================================================================


class SpecificationGroup(Base):
    """Heading that groups specification fields, e.g. "Dimensions"."""

    __tablename__ = "store_specification_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    fields = relationship(
        "SpecificationField", back_populates="group", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<SpecificationGroup {self.name}>"


class SpecificationField(Base):
    """A named specification a product can give a value for, e.g. "Weight"."""

    __tablename__ = "store_specification_fields"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    group_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("store_specification_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    group = relationship("SpecificationGroup", back_populates="fields")

    def __repr__(self):
        return f"<SpecificationField {self.name}>"


# ============================================================================
# PRODUCTS
# ============================================================================


class Product(Base):
    """Products listed in a store."""

    __tablename__ = "store_products"
    __table_args__ = (
        UniqueConstraint("store_id", "slug", name="uq_product_store_slug"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("store_categories.id"), nullable=False, index=True
    )
    sub_category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("store_subcategories.id"), nullable=True, index=True
    )
    brand_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("store_brands.id"), nullable=True, index=True
    )

    # Basic info
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(60), nullable=False)
    about: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    material_and_care: Mapped[list] = mapped_column(JSON, default=list)
    enabled_features: Mapped[list] = mapped_column(JSON, default=list)
    express_delivery: Mapped[bool] = mapped_column(Boolean, default=False)
    warranty: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Flags
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    is_new_arrival: Mapped[bool] = mapped_column(Boolean, default=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    # SEO
    meta_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    meta_keywords: Mapped[list] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    category = relationship("Category", back_populates="products")
    sub_category = relationship("SubCategory", back_populates="products")
    brand = relationship("Brand", back_populates="products")
    variants = relationship(
        "Variant", back_populates="product", cascade="all, delete-orphan"
    )
    reviews = relationship(
        "Review", back_populates="product", cascade="all, delete-orphan"
    )
    specifications = relationship(
        "ProductSpecification",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductSpecification.position",
    )

    def __repr__(self):
        return f"<Product {self.name}>"


class Variant(Base):
    """Purchasable size/colour instance of a product."""

    __tablename__ = "store_variants"
    __table_args__ = (CheckConstraint("stock >= 0", name="non_negative_stock"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("store_products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    size_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("store_sizes.id"), nullable=True
    )
    color_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("store_colors.id"), nullable=True
    )

    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sku: Mapped[Optional[str]] = mapped_column(String(100), unique=True, nullable=True)
    hsn: Mapped[Optional[str]] = mapped_column(String(50), unique=True, nullable=True)
    gst_in: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    product = relationship("Product", back_populates="variants")
    size = relationship("Size")
    color = relationship("Color")
    media = relationship(
        "VariantMedia", back_populates="variant", cascade="all, delete-orphan"
    )
    variant_prices = relationship(
        "VariantPrice",
        back_populates="variant",
        cascade="all, delete-orphan",
        order_by="VariantPrice.position",
    )

    def __repr__(self):
        return f"<Variant {self.sku or self.id} stock={self.stock}>"


class VariantMedia(Base):
    """Images and videos attached to a variant (stored as URLs)."""

    __tablename__ = "store_variant_media"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    variant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("store_variants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(String(512), nullable=False)
    media_type: Mapped[MediaType] = mapped_column(
        SAEnum(MediaType, values_callable=enum_values, name="store_media_type_enum"),
        default=MediaType.IMAGE,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    variant = relationship("Variant", back_populates="media")


class VariantPrice(Base):
    """Price/MRP pair of a variant for one location group."""

    __tablename__ = "store_variant_prices"
    __table_args__ = (
        UniqueConstraint(
            "variant_id", "location_group_id", name="uq_variant_location_group"
        ),
        CheckConstraint("price >= 0 AND mrp >= 0", name="non_negative_price"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    variant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("store_variants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    location_group_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("store_location_groups.id", ondelete="CASCADE"),
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    mrp: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # Order of entry in the admin form; the first record is the fallback price
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    variant = relationship("Variant", back_populates="variant_prices")
    location_group = relationship("LocationGroup")


class ProductSpecification(Base):
    """Value a product gives for one specification field."""

    __tablename__ = "store_product_specifications"
    __table_args__ = (
        UniqueConstraint(
            "product_id", "specification_field_id", name="uq_product_specification_field"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("store_products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    specification_field_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("store_specification_fields.id"), nullable=False, index=True
    )
    value: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    product = relationship("Product", back_populates="specifications")
    specification_field = relationship("SpecificationField")


# ============================================================================
# REVIEWS
# ============================================================================


class Review(Base):
    """Customer product reviews."""

    __tablename__ = "store_reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="rating_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("store_products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    images: Mapped[list] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    product = relationship("Product", back_populates="reviews")

    def __repr__(self):
        return f"<Review {self.rating}* product={self.product_id}>"
