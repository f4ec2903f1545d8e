"""
Class service: validation and lifecycle of bookable classes.
"""

from typing import List, Protocol
from uuid import UUID, uuid4

from api.src.errors import InvalidDataError, NotFoundError, RecordNotFoundError, StoreError
from api.src.models.classes import Class, NewClass, UpdateClass
from api.src.models.common import DEFAULT_PAGE_LIMIT, PageInfo


class ClassStore(Protocol):
    """Persistence capabilities the class service relies on."""

    async def add(self, class_id: UUID, new_class: NewClass) -> Class: ...

    async def get_by_id(self, class_id: UUID) -> Class: ...

    async def update(self, class_id: UUID, update_class: UpdateClass) -> Class: ...

    async def delete(self, class_id: UUID) -> None: ...

    async def list(self, limit: int, offset: int) -> List[Class]: ...


class ClassService:
    """Service for class operations."""

    def __init__(self, repository: ClassStore, max_page_limit: int = DEFAULT_PAGE_LIMIT):
        """
        Initialize class service.

        Args:
            repository: Class store
            max_page_limit: Page size used when a list request asks for none or too many
        """
        self.repository = repository
        self.max_page_limit = max_page_limit

    async def add_class(self, new_class: NewClass) -> Class:
        """
        Validate and persist a new class.

        Checks run in order: name, capacity, date range. The first failure wins.

        Raises:
            InvalidDataError: If any check fails
            StoreError: If the store rejects the insert
        """
        if not new_class.name.strip():
            raise InvalidDataError("missing class 'name'")

        if new_class.capacity <= 0:
            raise InvalidDataError("missing class 'capacity'")

        if new_class.start_date > new_class.end_date:
            raise InvalidDataError("start date cannot be later than end date")

        try:
            return await self.repository.add(uuid4(), new_class)
        except Exception as e:
            raise StoreError("failed to add class to repository") from e

    async def get_by_id(self, class_id: UUID) -> Class:
        """
        Get class by ID.

        Raises:
            NotFoundError: If the class does not exist
        """
        try:
            return await self.repository.get_by_id(class_id)
        except RecordNotFoundError as e:
            raise NotFoundError(f"class with ID {class_id} not found") from e

    async def update_class(self, class_id: UUID, update_class: UpdateClass) -> Class:
        """
        Apply a partial update to a class.

        Only the supplied values are checked; a new start date is not compared
        against the stored end date (and vice versa).

        Raises:
            InvalidDataError: If a supplied value is invalid on its own
            NotFoundError: If the class does not exist
        """
        if update_class.name is not None and not update_class.name.strip():
            raise InvalidDataError("class 'name' cannot be empty")

        if update_class.capacity is not None and update_class.capacity <= 0:
            raise InvalidDataError("class 'capacity' must be positive")

        if (
            update_class.start_date is not None
            and update_class.end_date is not None
            and update_class.start_date > update_class.end_date
        ):
            raise InvalidDataError("start date cannot be later than end date")

        try:
            return await self.repository.update(class_id, update_class)
        except RecordNotFoundError as e:
            raise NotFoundError(f"class with ID {class_id} not found") from e
        except Exception as e:
            raise StoreError("failed to update class in repository") from e

    async def delete_class(self, class_id: UUID) -> None:
        """Delete a class; a missing ID is not an error."""
        await self.repository.delete(class_id)

    async def list_classes(self, page_info: PageInfo) -> List[Class]:
        """List one page of classes."""
        page = page_info.clamp(self.max_page_limit)
        return await self.repository.list(page.limit, page.offset)
