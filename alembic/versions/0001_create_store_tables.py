"""create_store_tables

Revision ID: 0001_create_store_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_create_store_tables"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False))
    return columns


def _store_fk() -> sa.Column:
    return sa.Column(
        "store_id",
        sa.Uuid(),
        sa.ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def upgrade() -> None:
    """Upgrade schema - Create catalog, specification, location and order tables."""

    op.create_table(
        "stores",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("owner_id", sa.String(255), nullable=False, index=True),
        *_timestamps(),
    )

    op.create_table(
        "store_categories",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("banner_image", sa.String(512), nullable=True),
        sa.Column("billboard_label", sa.String(255), nullable=True),
        sa.Column("type", sa.String(50), nullable=True),
        sa.Column("classification", sa.String(50), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("store_id", "slug", name="uq_category_store_slug"),
    )

    op.create_table(
        "store_subcategories",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column(
            "category_id",
            sa.Uuid(),
            sa.ForeignKey("store_categories.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "parent_id",
            sa.Uuid(),
            sa.ForeignKey("store_subcategories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("banner_image", sa.String(512), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("store_id", "slug", name="uq_subcategory_store_slug"),
    )

    op.create_table(
        "store_brands",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("logo_url", sa.String(512), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("store_id", "slug", name="uq_brand_store_slug"),
    )

    op.create_table(
        "store_sizes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("value", sa.String(50), nullable=False),
    )

    op.create_table(
        "store_colors",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("value", sa.String(20), nullable=False),
    )

    op.create_table(
        "store_specification_groups",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "store_specification_fields",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column(
            "group_id",
            sa.Uuid(),
            sa.ForeignKey("store_specification_groups.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "store_location_groups",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "store_locations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column(
            "location_group_id",
            sa.Uuid(),
            sa.ForeignKey("store_location_groups.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("pincode", sa.String(20), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("is_cod_available", sa.Boolean(), nullable=False),
        sa.Column("delivery_days", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("store_id", "pincode", name="uq_location_store_pincode"),
        sa.CheckConstraint("delivery_days >= 1", name="positive_delivery_days"),
    )

    op.create_table(
        "store_products",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _store_fk(),
        sa.Column(
            "category_id",
            sa.Uuid(),
            sa.ForeignKey("store_categories.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "sub_category_id",
            sa.Uuid(),
            sa.ForeignKey("store_subcategories.id"),
            nullable=True,
            index=True,
        ),
        sa.Column(
            "brand_id",
            sa.Uuid(),
            sa.ForeignKey("store_brands.id"),
            nullable=True,
            index=True,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(60), nullable=False),
        sa.Column("about", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("material_and_care", sa.JSON(), nullable=False),
        sa.Column("enabled_features", sa.JSON(), nullable=False),
        sa.Column("express_delivery", sa.Boolean(), nullable=False),
        sa.Column("warranty", sa.String(255), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("is_new_arrival", sa.Boolean(), nullable=False),
        sa.Column("is_archived", sa.Boolean(), nullable=False, index=True),
        sa.Column("meta_title", sa.String(255), nullable=True),
        sa.Column("meta_description", sa.String(500), nullable=True),
        sa.Column("meta_keywords", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("store_id", "slug", name="uq_product_store_slug"),
    )

    op.create_table(
        "store_variants",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "product_id",
            sa.Uuid(),
            sa.ForeignKey("store_products.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("size_id", sa.Uuid(), sa.ForeignKey("store_sizes.id"), nullable=True),
        sa.Column("color_id", sa.Uuid(), sa.ForeignKey("store_colors.id"), nullable=True),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("sku", sa.String(100), nullable=True, unique=True),
        sa.Column("hsn", sa.String(50), nullable=True, unique=True),
        sa.Column("gst_in", sa.String(50), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("stock >= 0", name="non_negative_stock"),
    )

    op.create_table(
        "store_variant_media",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "variant_id",
            sa.Uuid(),
            sa.ForeignKey("store_variants.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("url", sa.String(512), nullable=False),
        sa.Column(
            "media_type",
            sa.Enum("image", "video", name="store_media_type_enum"),
            nullable=False,
        ),
        *_timestamps(updated=False),
    )

    op.create_table(
        "store_variant_prices",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "variant_id",
            sa.Uuid(),
            sa.ForeignKey("store_variants.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "location_group_id",
            sa.Uuid(),
            sa.ForeignKey("store_location_groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("mrp", sa.Numeric(12, 2), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint(
            "variant_id", "location_group_id", name="uq_variant_location_group"
        ),
        sa.CheckConstraint("price >= 0 AND mrp >= 0", name="non_negative_price"),
    )

    op.create_table(
        "store_product_specifications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "product_id",
            sa.Uuid(),
            sa.ForeignKey("store_products.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "specification_field_id",
            sa.Uuid(),
            sa.ForeignKey("store_specification_fields.id"),
            nullable=False,
            index=True,
        ),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.UniqueConstraint(
            "product_id", "specification_field_id", name="uq_product_specification_field"
        ),
    )

    op.create_table(
        "store_reviews",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "product_id",
            sa.Uuid(),
            sa.ForeignKey("store_products.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        *_timestamps(updated=False),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="rating_range"),
    )

    op.create_table(
        "store_orders",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "store_id",
            sa.Uuid(),
            sa.ForeignKey("stores.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("order_number", sa.String(20), nullable=False, unique=True, index=True),
        sa.Column("is_paid", sa.Boolean(), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("gateway_order_id", sa.String(100), nullable=True, index=True),
        sa.Column("amount_paise", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_store_orders_store_paid_created",
        "store_orders",
        ["store_id", "is_paid", "created_at"],
    )

    op.create_table(
        "store_order_items",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "order_id",
            sa.Uuid(),
            sa.ForeignKey("store_orders.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "variant_id",
            sa.Uuid(),
            sa.ForeignKey("store_variants.id"),
            nullable=False,
            index=True,
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("location_group_id", sa.Uuid(), nullable=True),
        sa.CheckConstraint("quantity > 0", name="positive_quantity"),
    )

    op.create_table(
        "store_stock_movements",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "variant_id",
            sa.Uuid(),
            sa.ForeignKey("store_variants.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "order_id",
            sa.Uuid(),
            sa.ForeignKey("store_orders.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "reason",
            sa.Enum("sale", "adjustment", name="store_stock_movement_reason_enum"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("stock_before", sa.Integer(), nullable=False),
        sa.Column("stock_after", sa.Integer(), nullable=False),
        sa.Column("notes", sa.String(255), nullable=True),
        *_timestamps(updated=False),
    )


def downgrade() -> None:
    """Downgrade schema - Drop all store tables."""
    op.drop_table("store_stock_movements")
    op.drop_table("store_order_items")
    op.drop_index("ix_store_orders_store_paid_created", table_name="store_orders")
    op.drop_table("store_orders")
    op.drop_table("store_reviews")
    op.drop_table("store_product_specifications")
    op.drop_table("store_variant_prices")
    op.drop_table("store_variant_media")
    op.drop_table("store_variants")
    op.drop_table("store_products")
    op.drop_table("store_locations")
    op.drop_table("store_location_groups")
    op.drop_table("store_specification_fields")
    op.drop_table("store_specification_groups")
    op.drop_table("store_colors")
    op.drop_table("store_sizes")
    op.drop_table("store_brands")
    op.drop_table("store_subcategories")
    op.drop_table("store_categories")
    op.drop_table("stores")
    sa.Enum(name="store_stock_movement_reason_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="store_media_type_enum").drop(op.get_bind(), checkfirst=True)
