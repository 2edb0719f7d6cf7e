"""User profile and administration routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from authcore.domain.entities import IdentityRole, IdentityStatus
from authcore.infrastructure.api.dependencies import (
    AuthenticatedIdentity,
    IdentityServiceDep,
    require_roles,
)
from authcore.infrastructure.api.schemas import (
    ApiResponse,
    ChangePasswordRequest,
    IdentityListResponse,
    IdentityResponse,
    PaginationResponse,
    UpdateProfileRequest,
)

router = APIRouter()


@router.get("/me", response_model=ApiResponse[IdentityResponse])
async def get_profile(
    current: AuthenticatedIdentity,
    service: IdentityServiceDep,
) -> ApiResponse[IdentityResponse]:
    """Get the caller's profile."""
    identity = await service.get_profile(current.identity_id)
    return ApiResponse(
        success=True,
        message="Profile retrieved successfully",
        data=IdentityResponse.model_validate(identity),
    )


@router.put("/me", response_model=ApiResponse[IdentityResponse])
async def update_profile(
    request: UpdateProfileRequest,
    current: AuthenticatedIdentity,
    service: IdentityServiceDep,
) -> ApiResponse[IdentityResponse]:
    """Update the caller's display name."""
    identity = await service.update_profile(current.identity_id, request.display_name)
    return ApiResponse(
        success=True,
        message="Profile updated successfully",
        data=IdentityResponse.model_validate(identity),
    )


@router.post(
    "/change-password",
    response_model=ApiResponse[None],
    responses={401: {"description": "Old password is wrong"}},
)
async def change_password(
    request: ChangePasswordRequest,
    current: AuthenticatedIdentity,
    service: IdentityServiceDep,
) -> ApiResponse[None]:
    """Change the caller's password. All refresh tokens are revoked."""
    await service.change_password(
        current.identity_id, request.old_password, request.new_password
    )
    return ApiResponse(success=True, message="Password changed successfully")


@router.get(
    "",
    response_model=ApiResponse[IdentityListResponse],
    dependencies=[Depends(require_roles(IdentityRole.ADMIN))],
)
async def list_users(
    service: IdentityServiceDep,
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query(le=100)] = 10,
    search: Annotated[str | None, Query(max_length=100)] = None,
    role: Annotated[IdentityRole | None, Query()] = None,
    status: Annotated[IdentityStatus | None, Query()] = None,
) -> ApiResponse[IdentityListResponse]:
    """List identities with filters and pagination. Admin only."""
    result = await service.list_identities(
        page=page, limit=limit, search=search, role=role, status=status
    )
    return ApiResponse(
        success=True,
        message="Users retrieved successfully",
        data=IdentityListResponse(
            users=[IdentityResponse.model_validate(item) for item in result.items],
            pagination=PaginationResponse(
                page=result.page,
                limit=result.limit,
                total=result.total,
                total_pages=result.total_pages,
            ),
        ),
    )
