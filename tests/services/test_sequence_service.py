"""Tests for the SequenceAllocator."""

import asyncio

import pytest
from sqlalchemy import select

from cableindex.core.errors import SiteNotFound
from cableindex.models import Label, SequenceKind, SiteCounter
from cableindex.services import SequenceAllocator, format_ref


async def insert_label(lifecycle, site, location, ref_number: int) -> None:
    """Write a label straight to the table, bypassing the counter."""
    async with lifecycle.transaction() as db:
        db.add(
            Label(
                site_id=site.id,
                ref_number=ref_number,
                ref_string=format_ref(site.code, ref_number),
                source_location_id=location.id,
                destination_location_id=location.id,
            )
        )


async def set_counter(lifecycle, site, kind: SequenceKind, value: int) -> None:
    async with lifecycle.transaction() as db:
        db.add(SiteCounter(site_id=site.id, kind=kind.value, next_value=value))


class TestAllocateNext:
    """Tests for allocating sequence values."""

    @pytest.mark.asyncio
    async def test_first_value_is_one(self, lifecycle, site):
        """A site with no labels starts at 1."""
        async with lifecycle.transaction() as db:
            allocator = SequenceAllocator(db)
            first = await allocator.allocate_next(site.id, SequenceKind.LABEL_REF)
            second = await allocator.allocate_next(site.id, SequenceKind.LABEL_REF)

        assert first == 1
        assert second == 2

    @pytest.mark.asyncio
    async def test_seeds_from_highest_existing_value(self, lifecycle, site, make_location):
        """A missing counter starts after the highest number already in use."""
        location = await make_location(site.id)
        await insert_label(lifecycle, site, location, 41)

        value = await lifecycle.allocate_sequence(site.id, SequenceKind.LABEL_REF)

        assert value == 42

    @pytest.mark.asyncio
    async def test_counters_are_per_site_and_kind(self, lifecycle, site, other_site):
        """Each (site, kind) pair has its own sequence."""
        assert await lifecycle.allocate_sequence(site.id, SequenceKind.LABEL_REF) == 1
        assert await lifecycle.allocate_sequence(site.id, SequenceKind.LABEL_REF) == 2
        assert await lifecycle.allocate_sequence(site.id, SequenceKind.SID_NUMBER) == 1
        assert await lifecycle.allocate_sequence(other_site.id, SequenceKind.LABEL_REF) == 1

    @pytest.mark.asyncio
    async def test_concurrent_allocations_are_unique(self, lifecycle, site):
        """Concurrent callers never receive the same value."""
        values = await asyncio.gather(
            *(lifecycle.allocate_sequence(site.id, SequenceKind.LABEL_REF) for _ in range(10))
        )

        assert sorted(values) == list(range(1, 11))

    @pytest.mark.asyncio
    async def test_values_increase_in_commit_order(self, lifecycle, site):
        """Sequential allocations strictly increase."""
        values = [
            await lifecycle.allocate_sequence(site.id, SequenceKind.SID_NUMBER) for _ in range(5)
        ]

        assert values == sorted(values)
        assert len(set(values)) == 5

    @pytest.mark.asyncio
    async def test_rollback_gives_value_back(self, lifecycle, site):
        """An aborted transaction does not consume its value."""
        with pytest.raises(RuntimeError):
            async with lifecycle.transaction() as db:
                value = await SequenceAllocator(db).allocate_next(site.id, SequenceKind.LABEL_REF)
                assert value == 1
                raise RuntimeError("abort")

        assert await lifecycle.allocate_sequence(site.id, SequenceKind.LABEL_REF) == 1

    @pytest.mark.asyncio
    async def test_unknown_site(self, lifecycle):
        """Allocating for a missing site raises SiteNotFound."""
        with pytest.raises(SiteNotFound):
            await lifecycle.allocate_sequence(9999, SequenceKind.LABEL_REF)

    @pytest.mark.asyncio
    async def test_counter_row_is_persisted(self, lifecycle, session_factory, site):
        """The counter row holds the next value after an allocation."""
        await lifecycle.allocate_sequence(site.id, SequenceKind.LABEL_REF)

        async with session_factory() as db:
            result = await db.execute(
                select(SiteCounter.next_value).where(
                    SiteCounter.site_id == site.id,
                    SiteCounter.kind == SequenceKind.LABEL_REF.value,
                )
            )
            assert result.scalar_one() == 2


class TestPeekAndResync:
    """Tests for reading and repairing counters."""

    @pytest.mark.asyncio
    async def test_peek_does_not_consume(self, lifecycle, site):
        """Peeking returns the next value without advancing."""
        async with lifecycle.transaction() as db:
            allocator = SequenceAllocator(db)
            assert await allocator.peek(site.id, SequenceKind.LABEL_REF) == 1
            assert await allocator.peek(site.id, SequenceKind.LABEL_REF) == 1
            assert await allocator.allocate_next(site.id, SequenceKind.LABEL_REF) == 1
            assert await allocator.peek(site.id, SequenceKind.LABEL_REF) == 2

    @pytest.mark.asyncio
    async def test_resync_moves_lagging_counter(self, lifecycle, site, make_location):
        """A counter behind the table is moved past the highest value."""
        location = await make_location(site.id)
        await set_counter(lifecycle, site, SequenceKind.LABEL_REF, 1)
        await insert_label(lifecycle, site, location, 5)

        async with lifecycle.transaction() as db:
            assert await SequenceAllocator(db).resync(site.id, SequenceKind.LABEL_REF) == 6

        assert await lifecycle.allocate_sequence(site.id, SequenceKind.LABEL_REF) == 6

    @pytest.mark.asyncio
    async def test_resync_never_lowers(self, lifecycle, site, make_location):
        """Gaps above the highest value are kept."""
        location = await make_location(site.id)
        await insert_label(lifecycle, site, location, 5)
        await set_counter(lifecycle, site, SequenceKind.LABEL_REF, 10)

        async with lifecycle.transaction() as db:
            assert await SequenceAllocator(db).resync(site.id, SequenceKind.LABEL_REF) == 10
