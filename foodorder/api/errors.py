"""Translation of service failures into HTTP errors.

Failed service results carry the domain error code string; this module
decides the HTTP status for it and raises the ``HTTPException`` whose
detail the application's exception handler renders.
"""

from fastapi import HTTPException, status

from foodorder.application.common import ServiceResult
from foodorder.domain.exceptions import (
    CartErrorCode,
    CommonErrorCode,
    ErrorCode,
    MenuErrorCode,
    OrderErrorCode,
)

NOT_FOUND_CODES: frozenset[ErrorCode] = frozenset(
    {
        CommonErrorCode.RESOURCE_NOT_FOUND,
        MenuErrorCode.MENU_NOT_FOUND,
        MenuErrorCode.OPTION_GROUP_NOT_FOUND,
        MenuErrorCode.OPTION_NOT_FOUND,
        CartErrorCode.CART_NOT_FOUND,
        OrderErrorCode.ORDER_NOT_FOUND,
    }
)

CONFLICT_CODES: frozenset[ErrorCode] = frozenset(
    {
        CommonErrorCode.CONFLICT,
        CommonErrorCode.OPTIMISTIC_LOCK_ERROR,
        MenuErrorCode.MENU_ALREADY_OPEN,
        MenuErrorCode.DUPLICATE_OPTION_GROUP_NAME,
        MenuErrorCode.MAX_REQUIRED_OPTION_GROUPS_EXCEEDED,
        MenuErrorCode.CANNOT_DELETE_REQUIRED_OPTION_GROUP,
    }
)

UNPROCESSABLE_CODES: frozenset[ErrorCode] = frozenset(
    {
        CartErrorCode.SHOP_NOT_OPEN,
        CartErrorCode.MENU_NOT_AVAILABLE,
        CartErrorCode.INVALID_OPTION_SELECTION,
        CartErrorCode.INVALID_USER_ID,
        OrderErrorCode.INVALID_USER_ID,
    }
)

_STATUS_BY_CODE: dict[str, int] = {
    **{c.code: status.HTTP_404_NOT_FOUND for c in NOT_FOUND_CODES},
    **{c.code: status.HTTP_409_CONFLICT for c in CONFLICT_CODES},
    **{c.code: 422 for c in UNPROCESSABLE_CODES},
    CommonErrorCode.EXTERNAL_SERVICE_ERROR.code: status.HTTP_503_SERVICE_UNAVAILABLE,
    CommonErrorCode.INTERNAL_SERVER_ERROR.code: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(error_code: str | None) -> int:
    """Get the HTTP status for a domain error code.

    Codes not listed explicitly are business rule violations and map to 400.

    Args:
        error_code: Domain error code string, e.g. ``CART-DOMAIN-011``.

    Returns:
        HTTP status code.
    """
    if error_code is None:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return _STATUS_BY_CODE.get(error_code, status.HTTP_400_BAD_REQUEST)


def raise_for_result(result: ServiceResult) -> None:
    """Raise an HTTPException if a service call failed.

    Args:
        result: Service result to check.

    Raises:
        HTTPException: If the result is a failure.
    """
    if result.success:
        return
    raise HTTPException(
        status_code=status_for(result.error_code),
        detail={
            "error_code": result.error_code or CommonErrorCode.INTERNAL_SERVER_ERROR.code,
            "message": result.error or "Request failed",
            "details": result.details,
        },
    )
