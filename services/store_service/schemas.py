"""Pydantic schemas for store service."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.store_service.models import MediaType

# ============================================================================
# STORE SCHEMAS
# ============================================================================


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class StoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


# ============================================================================
# CATEGORY SCHEMAS
# ============================================================================


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    banner_image: Optional[str] = Field(None, max_length=512)
    billboard_label: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, max_length=50)
    classification: Optional[str] = Field(None, max_length=50)


class CategoryCreate(CategoryBase):
    slug: Optional[str] = Field(None, max_length=100)  # Derived from name if omitted


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    banner_image: Optional[str] = Field(None, max_length=512)
    billboard_label: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, max_length=50)
    classification: Optional[str] = Field(None, max_length=50)


class CategoryResponse(CategoryBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    slug: str
    created_at: datetime
    updated_at: datetime


class SubCategoryNode(BaseModel):
    """One node of the nested subcategory tree."""

    id: uuid.UUID
    category_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    name: str
    slug: str
    banner_image: Optional[str] = None
    child_sub_categories: list["SubCategoryNode"] = []


class CategoryWithTree(CategoryResponse):
    sub_categories: list[SubCategoryNode] = []


# ============================================================================
# SUBCATEGORY SCHEMAS
# ============================================================================


class SubCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    category_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    banner_image: Optional[str] = Field(None, max_length=512)


class SubCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    category_id: Optional[uuid.UUID] = None
    parent_id: Optional[uuid.UUID] = None
    banner_image: Optional[str] = Field(None, max_length=512)


class SubCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    category_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    name: str
    slug: str
    banner_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SubCategoryAdminResponse(SubCategoryResponse):
    display_name: str  # "Parent > Child" breadcrumb
    category_name: Optional[str] = None


# ============================================================================
# BRAND, SIZE & COLOR SCHEMAS
# ============================================================================


class BrandCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=512)


class BrandUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=512)


class BrandResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AttributeCreate(BaseModel):
    """Sizes and colours share the same name/value shape."""

    name: str = Field(..., min_length=1, max_length=50)
    value: str = Field(..., min_length=1, max_length=50)


class AttributeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    value: str


# ============================================================================
# SPECIFICATION SCHEMAS
# ============================================================================


class SpecificationGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class SpecificationGroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    name: str
    created_at: datetime
    updated_at: datetime


class SpecificationFieldCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    group_id: uuid.UUID


class SpecificationFieldUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    group_id: Optional[uuid.UUID] = None


class SpecificationFieldResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    group_id: uuid.UUID
    name: str
    group: Optional[SpecificationGroupResponse] = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# LOCATION SCHEMAS
# ============================================================================


class LocationCreate(BaseModel):
    pincode: str = Field(..., min_length=1, max_length=20)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    is_cod_available: bool = False
    delivery_days: int = Field(1, ge=1)
    location_group_id: Optional[uuid.UUID] = None


class LocationUpdate(BaseModel):
    pincode: Optional[str] = Field(None, min_length=1, max_length=20)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    is_cod_available: Optional[bool] = None
    delivery_days: Optional[int] = Field(None, ge=1)
    location_group_id: Optional[uuid.UUID] = None


class LocationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    location_group_id: Optional[uuid.UUID] = None
    pincode: str
    city: str
    state: str
    country: str
    is_cod_available: bool
    delivery_days: int
    created_at: datetime
    updated_at: datetime


class LocationGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    location_ids: list[uuid.UUID] = []


class LocationGroupUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    location_ids: Optional[list[uuid.UUID]] = None  # Replaces membership when set


class LocationGroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    name: str
    locations: list[LocationResponse] = []
    created_at: datetime
    updated_at: datetime


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class VariantPriceInput(BaseModel):
    location_group_id: uuid.UUID
    price: Decimal = Field(..., ge=0)
    mrp: Decimal = Field(..., ge=0)


class VariantMediaInput(BaseModel):
    url: str = Field(..., min_length=1, max_length=512)
    media_type: MediaType = MediaType.IMAGE


class VariantInput(BaseModel):
    id: Optional[uuid.UUID] = None  # Existing variant being kept on update
    size_id: Optional[uuid.UUID] = None
    color_id: Optional[uuid.UUID] = None
    stock: int = Field(0, ge=0)
    sku: Optional[str] = Field(None, max_length=100)
    hsn: Optional[str] = Field(None, max_length=50)
    gst_in: Optional[str] = Field(None, max_length=50)
    media: list[VariantMediaInput] = []
    variant_prices: list[VariantPriceInput] = []


class ProductSpecificationInput(BaseModel):
    specification_field_id: uuid.UUID
    value: str = Field(..., min_length=1)


class ProductSpecificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    specification_field_id: uuid.UUID
    value: str
    specification_field: SpecificationFieldResponse


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=60)
    category_id: uuid.UUID
    sub_category_id: Optional[uuid.UUID] = None
    brand_id: Optional[uuid.UUID] = None
    about: Optional[str] = None
    description: str = Field(..., min_length=1)
    material_and_care: list[str] = []
    enabled_features: list[str] = []
    express_delivery: bool = False
    warranty: Optional[str] = Field(None, max_length=255)
    is_featured: bool = False
    is_new_arrival: bool = False
    is_archived: bool = False
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    meta_keywords: list[str] = []
    variants: list[VariantInput] = []
    specifications: list[ProductSpecificationInput] = []


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=60)
    category_id: Optional[uuid.UUID] = None
    sub_category_id: Optional[uuid.UUID] = None
    brand_id: Optional[uuid.UUID] = None
    about: Optional[str] = None
    description: Optional[str] = Field(None, min_length=1)
    material_and_care: Optional[list[str]] = None
    enabled_features: Optional[list[str]] = None
    express_delivery: Optional[bool] = None
    warranty: Optional[str] = Field(None, max_length=255)
    is_featured: Optional[bool] = None
    is_new_arrival: Optional[bool] = None
    is_archived: Optional[bool] = None
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    meta_keywords: Optional[list[str]] = None
    variants: Optional[list[VariantInput]] = None  # Replaces all variants when set
    # Replaces all specification values when set
    specifications: Optional[list[ProductSpecificationInput]] = None


class VariantPriceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    location_group_id: uuid.UUID
    price: Decimal
    mrp: Decimal


class VariantMediaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    url: str
    media_type: MediaType


class ResolvedPriceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    price: Decimal
    mrp: Decimal
    location_group_id: Optional[uuid.UUID] = None


class VariantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    size_id: Optional[uuid.UUID] = None
    color_id: Optional[uuid.UUID] = None
    stock: int
    sku: Optional[str] = None
    hsn: Optional[str] = None
    gst_in: Optional[str] = None
    size: Optional[AttributeResponse] = None
    color: Optional[AttributeResponse] = None
    media: list[VariantMediaResponse] = []
    variant_prices: list[VariantPriceResponse] = []
    resolved_price: Optional[ResolvedPriceResponse] = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    category_id: uuid.UUID
    sub_category_id: Optional[uuid.UUID] = None
    brand_id: Optional[uuid.UUID] = None
    name: str
    slug: str
    about: Optional[str] = None
    description: str
    material_and_care: list[str] = []
    enabled_features: list[str] = []
    express_delivery: bool
    warranty: Optional[str] = None
    is_featured: bool
    is_new_arrival: bool
    is_archived: bool
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: list[str] = []
    created_at: datetime
    updated_at: datetime
    brand: Optional[BrandResponse] = None
    variants: list[VariantResponse] = []
    specifications: list[ProductSpecificationResponse] = []


class StorefrontProduct(ProductResponse):
    average_rating: float = 0
    number_of_ratings: int = 0
    # Only present when the detail endpoint is asked for related products
    related_products: Optional[list["StorefrontProduct"]] = None


class ProductListResponse(BaseModel):
    """Storefront product page."""

    products: list[StorefrontProduct]
    total_count: int


class AdminProductListResponse(BaseModel):
    items: list[ProductResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class HotDealProduct(ProductResponse):
    total_sold: int


# ============================================================================
# REVIEW SCHEMAS
# ============================================================================


class ReviewCreate(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=255)
    user_name: str = Field(..., min_length=1, max_length=255)
    rating: int = Field(..., ge=1, le=5)
    text: str = Field(..., min_length=1)
    images: list[str] = []


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    user_id: str
    user_name: str
    rating: int
    text: str
    images: list[str] = []
    created_at: datetime


# ============================================================================
# SEARCH SCHEMAS
# ============================================================================


class SearchPagination(BaseModel):
    page: int
    limit: int
    total_brands: int
    total_categories: int
    total_sub_categories: int
    total_products: int


class SearchResponse(BaseModel):
    brands: list[BrandResponse]
    categories: list[CategoryWithTree]
    sub_categories: list[SubCategoryResponse]
    products: list[ProductResponse]
    pagination: SearchPagination


# ============================================================================
# CHECKOUT & ORDER SCHEMAS
# ============================================================================


class CheckoutItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID  # Variant ID
    quantity: int = Field(..., gt=0)
    location_group_id: Optional[uuid.UUID] = Field(None, alias="locationGroupId")


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    products: list[CheckoutItem] = []
    order_id: Optional[uuid.UUID] = Field(None, alias="orderId")
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None


class CheckoutResponse(BaseModel):
    order_id: uuid.UUID
    order_number: str
    gateway_order_id: str
    amount: int  # in paise
    currency: str
    key: str


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    variant_id: uuid.UUID
    quantity: int
    unit_price: Decimal
    location_group_id: Optional[uuid.UUID] = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    order_number: str
    is_paid: bool
    paid_at: Optional[datetime] = None
    phone: str
    address: str
    gateway_order_id: Optional[str] = None
    amount_paise: int
    created_at: datetime
    order_items: list[OrderItemResponse] = []


class OrderSummary(BaseModel):
    """Row of the admin orders table."""

    id: uuid.UUID
    order_number: str
    phone: str
    address: str
    products: str  # Comma-separated line descriptions
    total_price: Decimal
    is_paid: bool
    created_at: datetime


# ============================================================================
# DASHBOARD SCHEMAS
# ============================================================================


class MonthlyRevenue(BaseModel):
    name: str
    total: Decimal


class DashboardResponse(BaseModel):
    total_revenue: Decimal
    sales_count: int
    products_in_stock: int
    graph_revenue: list[MonthlyRevenue]
