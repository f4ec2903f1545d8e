"""
Classes router.

Endpoints for scheduling, reading, rescheduling, cancelling and listing
gym classes.
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Body, Depends, Response, status

from api.src.dependencies import get_class_service, get_page_info
from api.src.models.classes import Class, NewClass, UpdateClass
from api.src.models.common import ErrorResponse, PageInfo
from api.src.services.classes_service import ClassService

router = APIRouter(
    prefix="/classes",
    tags=["Classes"],
    responses={
        400: {"model": ErrorResponse, "description": "Malformed request"},
        500: {"model": ErrorResponse, "description": "Internal server error"}
    }
)


@router.post(
    "",
    response_model=Class,
    status_code=status.HTTP_201_CREATED,
    summary="Add Class",
    responses={422: {"model": ErrorResponse, "description": "Invalid class data"}}
)
async def add_class(
    new_class: NewClass = Body(...),
    service: ClassService = Depends(get_class_service)
) -> Class:
    """
    Schedule a class.

    Requires a non-empty name, a positive capacity and ``startDate`` not
    after ``endDate``.
    """
    return await service.add_class(new_class)


@router.get(
    "/{class_id}",
    response_model=Class,
    summary="Get Class",
    responses={404: {"model": ErrorResponse, "description": "Class not found"}}
)
async def get_class(
    class_id: UUID,
    service: ClassService = Depends(get_class_service)
) -> Class:
    return await service.get_by_id(class_id)


@router.patch(
    "/{class_id}",
    response_model=Class,
    summary="Update Class",
    responses={
        404: {"model": ErrorResponse, "description": "Class not found"},
        422: {"model": ErrorResponse, "description": "Invalid class data"}
    }
)
async def update_class(
    class_id: UUID,
    changes: UpdateClass = Body(...),
    service: ClassService = Depends(get_class_service)
) -> Class:
    return await service.update_class(class_id, changes)


@router.delete(
    "/{class_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Class"
)
async def delete_class(
    class_id: UUID,
    service: ClassService = Depends(get_class_service)
) -> Response:
    await service.delete_class(class_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=List[Class],
    summary="List Classes"
)
async def list_classes(
    page_info: PageInfo = Depends(get_page_info),
    service: ClassService = Depends(get_class_service)
) -> List[Class]:
    return await service.list_classes(page_info)
