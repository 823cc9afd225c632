"""Enum definitions for store service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class MediaType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"


class StockMovementReason(str, enum.Enum):
    SALE = "sale"
    ADJUSTMENT = "adjustment"
