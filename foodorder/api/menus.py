"""Menu API endpoints.

Provides endpoints for shop operators:
- POST /menus - create a menu
- GET /menus/{id} - menu details
- GET /menus?shop_id=... - a shop's menus
- Option group and option management under /menus/{id}/option-groups
- POST /menus/{id}/open - open a menu to customers
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from foodorder.api.errors import raise_for_result
from foodorder.api.schemas import (
    CommandResultResponse,
    ErrorResponse,
    MenuCreateRequest,
    MenuResponse,
    MenusListResponse,
    MoneySchema,
    OptionGroupCreateRequest,
    OptionGroupRenameRequest,
    OptionGroupSchema,
    OptionRenameRequest,
    OptionRequest,
    OptionSchema,
)
from foodorder.application.menu_service import MenuService, get_menu_service
from foodorder.domain.entities import Menu

router = APIRouter(prefix="/menus", tags=["Menus"])

COMMAND_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


# ============================================================================
# Dependencies
# ============================================================================


def get_service(request: Request) -> MenuService:
    """Get menu service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_menu_service(request_id=request_id)


# ============================================================================
# Converters
# ============================================================================


def menu_to_response(menu: Menu) -> MenuResponse:
    """Convert Menu aggregate to response schema."""
    return MenuResponse(
        id=str(menu.id),
        shop_id=str(menu.shop_id),
        name=menu.name,
        description=menu.description,
        base_price=MoneySchema.from_money(menu.base_price),
        is_open=menu.is_open,
        option_groups=[
            OptionGroupSchema(
                id=str(group.id),
                name=group.name,
                required=group.required,
                options=[
                    OptionSchema(
                        id=str(group.option_id_of(o)),
                        name=o.name,
                        price=MoneySchema.from_money(o.price),
                    )
                    for o in group.options
                ],
            )
            for group in menu.option_groups
        ],
        version=menu.version,
    )


# ============================================================================
# Menu Endpoints
# ============================================================================


@router.post(
    "",
    response_model=CommandResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create menu",
    description="Create a new menu. Menus start closed.",
)
async def create_menu(
    request: MenuCreateRequest,
    service: Annotated[MenuService, Depends(get_service)],
) -> CommandResultResponse:
    """Create a menu.

    Args:
        request: Menu creation request.
        service: Menu service.

    Returns:
        Command result carrying the new menu id.

    Raises:
        HTTPException: On validation error.
    """
    result = await service.create_menu(
        shop_id=request.shop_id,
        name=request.name,
        base_price=request.base_price,
        description=request.description,
        currency=request.currency,
    )
    raise_for_result(result)
    return CommandResultResponse(message="Menu created", resource_id=result.resource_id)


@router.get(
    "",
    response_model=MenusListResponse,
    responses={400: {"model": ErrorResponse}},
    summary="List menus",
    description="List the menus of a shop, oldest first.",
)
async def list_menus(
    service: Annotated[MenuService, Depends(get_service)],
    shop_id: str = Query(..., description="Shop identifier"),
) -> MenusListResponse:
    """List a shop's menus."""
    result = await service.list_menus(shop_id)
    raise_for_result(result)
    return MenusListResponse(
        items=[menu_to_response(menu) for menu in result.menus],
        total=len(result.menus),
    )


@router.get(
    "/{menu_id}",
    response_model=MenuResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get menu",
    description="Get a menu with its option groups.",
)
async def get_menu(
    menu_id: str,
    service: Annotated[MenuService, Depends(get_service)],
) -> MenuResponse:
    """Get a menu by ID.

    Raises:
        HTTPException: If menu not found.
    """
    result = await service.get_menu(menu_id)
    raise_for_result(result)
    return menu_to_response(result.menu)


@router.post(
    "/{menu_id}/open",
    response_model=CommandResultResponse,
    responses=COMMAND_ERRORS,
    summary="Open menu",
    description=(
        "Open a menu to customers. Requires at least one option group, "
        "at most three required groups and at least one priced option."
    ),
)
async def open_menu(
    menu_id: str,
    service: Annotated[MenuService, Depends(get_service)],
) -> CommandResultResponse:
    """Open a menu.

    Args:
        menu_id: Menu identifier.
        service: Menu service.

    Returns:
        Command result.

    Raises:
        HTTPException: If the menu is missing, already open or does not
            satisfy the publication rules.
    """
    result = await service.open_menu(menu_id)
    raise_for_result(result)
    return CommandResultResponse(message="Menu opened", resource_id=result.resource_id)


# ============================================================================
# Option Group Endpoints
# ============================================================================


@router.post(
    "/{menu_id}/option-groups",
    response_model=CommandResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses=COMMAND_ERRORS,
    summary="Add option group",
)
async def add_option_group(
    menu_id: str,
    request: OptionGroupCreateRequest,
    service: Annotated[MenuService, Depends(get_service)],
) -> CommandResultResponse:
    """Add an option group; the result carries the new group's id."""
    result = await service.add_option_group(menu_id, request.name, request.required)
    raise_for_result(result)
    return CommandResultResponse(
        message="Option group added", resource_id=result.resource_id
    )


@router.patch(
    "/{menu_id}/option-groups/{group_id}",
    response_model=CommandResultResponse,
    responses=COMMAND_ERRORS,
    summary="Rename option group",
)
async def rename_option_group(
    menu_id: str,
    group_id: str,
    request: OptionGroupRenameRequest,
    service: Annotated[MenuService, Depends(get_service)],
) -> CommandResultResponse:
    result = await service.change_option_group_name(menu_id, group_id, request.name)
    raise_for_result(result)
    return CommandResultResponse(
        message="Option group renamed", resource_id=result.resource_id
    )


@router.delete(
    "/{menu_id}/option-groups/{group_id}",
    response_model=CommandResultResponse,
    responses=COMMAND_ERRORS,
    summary="Remove option group",
)
async def remove_option_group(
    menu_id: str,
    group_id: str,
    service: Annotated[MenuService, Depends(get_service)],
) -> CommandResultResponse:
    result = await service.remove_option_group(menu_id, group_id)
    raise_for_result(result)
    return CommandResultResponse(
        message="Option group removed", resource_id=result.resource_id
    )


# ============================================================================
# Option Endpoints
# ============================================================================


@router.post(
    "/{menu_id}/option-groups/{group_id}/options",
    response_model=CommandResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses=COMMAND_ERRORS,
    summary="Add option",
)
async def add_option(
    menu_id: str,
    group_id: str,
    request: OptionRequest,
    service: Annotated[MenuService, Depends(get_service)],
) -> CommandResultResponse:
    result = await service.add_option(
        menu_id, group_id, request.name, request.price, request.currency
    )
    raise_for_result(result)
    return CommandResultResponse(message="Option added", resource_id=result.resource_id)


@router.patch(
    "/{menu_id}/option-groups/{group_id}/options",
    response_model=CommandResultResponse,
    responses=COMMAND_ERRORS,
    summary="Rename option",
    description="Rename the option identified by its current name and price.",
)
async def rename_option(
    menu_id: str,
    group_id: str,
    request: OptionRenameRequest,
    service: Annotated[MenuService, Depends(get_service)],
) -> CommandResultResponse:
    result = await service.change_option_name(
        menu_id,
        group_id,
        current_name=request.name,
        current_price=request.price,
        new_name=request.new_name,
        currency=request.currency,
    )
    raise_for_result(result)
    return CommandResultResponse(
        message="Option renamed", resource_id=result.resource_id
    )


@router.delete(
    "/{menu_id}/option-groups/{group_id}/options",
    response_model=CommandResultResponse,
    responses=COMMAND_ERRORS,
    summary="Remove option",
    description="Remove the option identified by its name and price.",
)
async def remove_option(
    menu_id: str,
    group_id: str,
    request: OptionRequest,
    service: Annotated[MenuService, Depends(get_service)],
) -> CommandResultResponse:
    result = await service.remove_option(
        menu_id, group_id, request.name, request.price, request.currency
    )
    raise_for_result(result)
    return CommandResultResponse(
        message="Option removed", resource_id=result.resource_id
    )
