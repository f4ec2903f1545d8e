"""
Members router.

Provides REST API endpoints for gym members:
- Register a member
- Read, rename and remove a member
- List members page by page

Domain errors raised by the service are turned into responses by the
application exception handlers.
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Body, Depends, Response, status

from api.src.dependencies import get_member_service, get_page_info
from api.src.models.common import ErrorResponse, PageInfo
from api.src.models.members import Member, NewMember, UpdateMember
from api.src.services.members_service import MemberService

router = APIRouter(
    prefix="/members",
    tags=["Members"],
    responses={
        400: {"model": ErrorResponse, "description": "Malformed request"},
        500: {"model": ErrorResponse, "description": "Internal server error"}
    }
)


@router.post(
    "",
    response_model=Member,
    status_code=status.HTTP_201_CREATED,
    summary="Add Member",
    responses={422: {"model": ErrorResponse, "description": "Missing member name"}}
)
async def add_member(
    new_member: NewMember = Body(...),
    service: MemberService = Depends(get_member_service)
) -> Member:
    """Register a new member. The ID and timestamps are assigned by the server."""
    return await service.add_member(new_member)


@router.get(
    "/{member_id}",
    response_model=Member,
    summary="Get Member",
    responses={404: {"model": ErrorResponse, "description": "Member not found"}}
)
async def get_member(
    member_id: UUID,
    service: MemberService = Depends(get_member_service)
) -> Member:
    return await service.get_by_id(member_id)


@router.patch(
    "/{member_id}",
    response_model=Member,
    summary="Update Member",
    responses={
        404: {"model": ErrorResponse, "description": "Member not found"},
        422: {"model": ErrorResponse, "description": "Invalid member data"}
    }
)
async def update_member(
    member_id: UUID,
    changes: UpdateMember = Body(...),
    service: MemberService = Depends(get_member_service)
) -> Member:
    """
    Partially update a member.

    Only fields present in the body change. An empty body returns the
    member as stored.
    """
    return await service.update_member(member_id, changes)


@router.delete(
    "/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Member"
)
async def delete_member(
    member_id: UUID,
    service: MemberService = Depends(get_member_service)
) -> Response:
    """Delete a member. Deleting an unknown ID also returns 204."""
    await service.delete_member(member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=List[Member],
    summary="List Members"
)
async def list_members(
    page_info: PageInfo = Depends(get_page_info),
    service: MemberService = Depends(get_member_service)
) -> List[Member]:
    """List members in creation order, ``limit`` per page starting at ``page``."""
    return await service.list_members(page_info)
