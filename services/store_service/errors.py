"""Domain errors raised by store service routines."""

from fastapi import status
from libs.common.error_handler import AppError


class StoreError(AppError):
    """Base class for store domain errors."""

    code = "STORE_ERROR"


class LocationNotFoundError(StoreError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "LOCATION_NOT_FOUND"


class SubCategoryCycleError(StoreError):
    status_code = status.HTTP_409_CONFLICT
    code = "SUBCATEGORY_CYCLE"


class SlugAllocationError(StoreError):
    status_code = status.HTTP_409_CONFLICT
    code = "SLUG_UNAVAILABLE"


class InvalidTimeFrameError(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_TIME_FRAME"


class OrderNotFoundError(StoreError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "ORDER_NOT_FOUND"


class OrderNumberAllocationError(StoreError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "ORDER_NUMBER_UNAVAILABLE"
