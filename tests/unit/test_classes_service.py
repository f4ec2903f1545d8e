"""
Unit tests for the class service.

Tests cover:
- Validation order on create (name, capacity, date range)
- Partial update validation
- Not-found translation and store failure wrapping
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

from api.src.errors import InvalidDataError, NotFoundError, StoreError
from api.src.models.classes import NewClass, UpdateClass
from api.src.models.common import PageInfo
from api.src.services.classes_service import ClassService


START = datetime(2025, 3, 1, tzinfo=timezone.utc)
END = START + timedelta(days=10)


def new_class(**overrides) -> NewClass:
    fields = {"name": "Pilates", "start_date": START, "end_date": END, "capacity": 10}
    fields.update(overrides)
    return NewClass(**fields)


class TestAddClass:
    """Tests for scheduling classes."""

    @pytest.mark.asyncio
    async def test_add_class_stores_range_and_capacity(self, class_service):
        gym_class = await class_service.add_class(new_class())

        assert gym_class.name == "Pilates"
        assert gym_class.start_date == START
        assert gym_class.end_date == END
        assert gym_class.capacity == 10

    @pytest.mark.asyncio
    async def test_single_instant_range_is_valid(self, class_service):
        gym_class = await class_service.add_class(new_class(end_date=START))

        assert gym_class.start_date == gym_class.end_date

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"name": ""}, "name"),
            ({"name": "   "}, "name"),
            ({"capacity": 0}, "capacity"),
            ({"capacity": -3}, "capacity"),
            ({"start_date": END, "end_date": START}, "start date"),
            # Name is checked before capacity.
            ({"name": "", "capacity": 0}, "name"),
        ],
    )
    async def test_add_class_rejects_invalid_data(self, class_service, class_store, overrides, message):
        with pytest.raises(InvalidDataError) as exc_info:
            await class_service.add_class(new_class(**overrides))

        assert message in exc_info.value.message
        assert class_store.rows == {}

    @pytest.mark.asyncio
    async def test_add_class_wraps_store_failure(self):
        store = AsyncMock()
        store.add.side_effect = RuntimeError("disk full")

        with pytest.raises(StoreError):
            await ClassService(store).add_class(new_class())


class TestUpdateClass:
    """Tests for partial class updates."""

    @pytest.mark.asyncio
    async def test_update_capacity_only(self, class_service):
        gym_class = await class_service.add_class(new_class())

        updated = await class_service.update_class(gym_class.id, UpdateClass(capacity=25))

        assert updated.capacity == 25
        assert updated.name == "Pilates"
        assert updated.start_date == START

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "changes",
        [
            UpdateClass(name=""),
            UpdateClass(capacity=0),
            UpdateClass(start_date=END, end_date=START),
        ],
    )
    async def test_update_rejects_invalid_values(self, class_service, changes):
        gym_class = await class_service.add_class(new_class())

        with pytest.raises(InvalidDataError):
            await class_service.update_class(gym_class.id, changes)

    @pytest.mark.asyncio
    async def test_update_missing_class_raises_not_found(self, class_service):
        with pytest.raises(NotFoundError):
            await class_service.update_class(uuid4(), UpdateClass(name="Yoga"))


class TestReadDeleteListClasses:
    """Tests for reading, deleting and listing classes."""

    @pytest.mark.asyncio
    async def test_get_missing_class_raises_not_found(self, class_service):
        with pytest.raises(NotFoundError):
            await class_service.get_by_id(uuid4())

    @pytest.mark.asyncio
    async def test_delete_unknown_class_is_not_an_error(self, class_service):
        await class_service.delete_class(uuid4())

    @pytest.mark.asyncio
    async def test_list_uses_default_limit_when_unset(self):
        store = AsyncMock()
        store.list.return_value = []

        await ClassService(store).list_classes(PageInfo())

        store.list.assert_awaited_once_with(100, 0)

    @pytest.mark.asyncio
    async def test_list_honours_configured_maximum(self):
        store = AsyncMock()
        store.list.return_value = []

        await ClassService(store, max_page_limit=20).list_classes(PageInfo(limit=50, page=1))

        store.list.assert_awaited_once_with(20, 20)
