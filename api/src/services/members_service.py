"""
Member service: validation and lifecycle of gym members.
"""

from typing import List, Protocol
from uuid import UUID, uuid4

from api.src.errors import InvalidDataError, NotFoundError, RecordNotFoundError, StoreError
from api.src.models.common import DEFAULT_PAGE_LIMIT, PageInfo
from api.src.models.members import Member, NewMember, UpdateMember


class MemberStore(Protocol):
    """Persistence capabilities the member service relies on."""

    async def add(self, member_id: UUID, new_member: NewMember) -> Member: ...

    async def get_by_id(self, member_id: UUID) -> Member: ...

    async def update(self, member_id: UUID, update_member: UpdateMember) -> Member: ...

    async def delete(self, member_id: UUID) -> None: ...

    async def list(self, limit: int, offset: int) -> List[Member]: ...


class MemberService:
    """Service for member operations."""

    def __init__(self, repository: MemberStore, max_page_limit: int = DEFAULT_PAGE_LIMIT):
        """
        Initialize member service.

        Args:
            repository: Member store
            max_page_limit: Page size used when a list request asks for none or too many
        """
        self.repository = repository
        self.max_page_limit = max_page_limit

    async def add_member(self, new_member: NewMember) -> Member:
        """
        Validate and persist a new member.

        Raises:
            InvalidDataError: If the name is empty
            StoreError: If the store rejects the insert
        """
        if not new_member.name.strip():
            raise InvalidDataError("missing member 'name'")

        try:
            return await self.repository.add(uuid4(), new_member)
        except Exception as e:
            raise StoreError("failed to add member to repository") from e

    async def get_by_id(self, member_id: UUID) -> Member:
        """
        Get member by ID.

        Raises:
            NotFoundError: If the member does not exist
        """
        try:
            return await self.repository.get_by_id(member_id)
        except RecordNotFoundError as e:
            raise NotFoundError(f"member with ID {member_id} not found") from e

    async def update_member(self, member_id: UUID, update_member: UpdateMember) -> Member:
        """
        Apply a partial update to a member.

        Raises:
            InvalidDataError: If a supplied name is empty
            NotFoundError: If the member does not exist
        """
        if update_member.name is not None and not update_member.name.strip():
            raise InvalidDataError("member 'name' cannot be empty")

        try:
            return await self.repository.update(member_id, update_member)
        except RecordNotFoundError as e:
            raise NotFoundError(f"member with ID {member_id} not found") from e
        except Exception as e:
            raise StoreError("failed to update member in repository") from e

    async def delete_member(self, member_id: UUID) -> None:
        """Delete a member; a missing ID is not an error."""
        await self.repository.delete(member_id)

    async def list_members(self, page_info: PageInfo) -> List[Member]:
        """List one page of members."""
        page = page_info.clamp(self.max_page_limit)
        return await self.repository.list(page.limit, page.offset)
