"""Tests for the DeletionEngine and strategy-driven deletes."""

import pytest
from sqlalchemy import func, select

from cableindex.core.errors import InUse, InvalidReplacement, NotFound
from cableindex.models import Label, ReferenceKind, Sid, SidNic, SidNote, SiteLocation, SiteVlan
from cableindex.schemas import (
    DeleteStrategy,
    LabelCreate,
    NicCreate,
    NoteCreate,
    SidCreate,
    VlanCreate,
)
from cableindex.services import DeletionEngine


async def count_rows(session_factory, model, *criteria) -> int:
    async with session_factory() as db:
        result = await db.execute(select(func.count()).select_from(model).where(*criteria))
        return result.scalar_one()


async def make_label(lifecycle, site_id, source, destination, cable_type=None) -> Label:
    return await lifecycle.create_label(
        site_id,
        LabelCreate(
            source_location_id=source.id,
            destination_location_id=destination.id,
            cable_type_id=cable_type.id if cable_type else None,
        ),
    )


class TestLocationStrategies:
    """Deleting locations with each strategy."""

    @pytest.mark.asyncio
    async def test_reassign_moves_every_reference(
        self, lifecycle, session_factory, site, make_location
    ):
        """Reassign repoints source and destination references, then deletes."""
        old = await make_location(site.id)
        new = await make_location(site.id)
        other = await make_location(site.id)
        await make_label(lifecycle, site.id, old, other)
        await make_label(lifecycle, site.id, old, other)
        await make_label(lifecycle, site.id, other, old)

        result = await lifecycle.delete_referenced_row(
            site.id,
            ReferenceKind.LOCATION,
            old.id,
            strategy=DeleteStrategy.REASSIGN,
            replacement_id=new.id,
        )

        assert result.strategy_used == DeleteStrategy.REASSIGN
        assert result.usage["source"] == 2
        assert result.usage["destination"] == 1
        assert result.reassigned == {"source": 2, "destination": 1, "installation": 0}
        assert result.replacement_id == new.id

        assert await count_rows(session_factory, SiteLocation, SiteLocation.id == old.id) == 0
        assert (
            await count_rows(
                session_factory,
                Label,
                (Label.source_location_id == old.id) | (Label.destination_location_id == old.id),
            )
            == 0
        )
        assert await count_rows(session_factory, Label, Label.source_location_id == new.id) == 2
        assert (
            await count_rows(session_factory, Label, Label.destination_location_id == new.id) == 1
        )

    @pytest.mark.asyncio
    async def test_auto_blocks_when_referenced(
        self, lifecycle, session_factory, site, make_location
    ):
        """Auto refuses while a label points at the location."""
        target = await make_location(site.id)
        other = await make_location(site.id)
        await make_label(lifecycle, site.id, other, target)

        with pytest.raises(InUse) as exc_info:
            await lifecycle.delete_referenced_row(site.id, ReferenceKind.LOCATION, target.id)

        detail = exc_info.value.detail
        assert detail["usage"] == {"source": 0, "destination": 1, "installation": 0}
        assert detail["total_in_use"] == 1
        assert await count_rows(session_factory, SiteLocation, SiteLocation.id == target.id) == 1

    @pytest.mark.asyncio
    async def test_installed_sid_blocks_auto(self, lifecycle, site, make_location):
        """A SID installed at a location counts as usage."""
        target = await make_location(site.id)
        await lifecycle.create_sid(site.id, SidCreate(location_id=target.id))

        with pytest.raises(InUse) as exc_info:
            await lifecycle.delete_referenced_row(site.id, ReferenceKind.LOCATION, target.id)

        assert exc_info.value.detail["usage"]["installation"] == 1

    @pytest.mark.asyncio
    async def test_cascade_removes_references(
        self, lifecycle, session_factory, site, make_location
    ):
        """Cascade deletes referencing labels; a label counted once."""
        target = await make_location(site.id)
        other = await make_location(site.id)
        await make_label(lifecycle, site.id, target, target)
        await make_label(lifecycle, site.id, other, target)
        kept = await make_label(lifecycle, site.id, other, other)

        result = await lifecycle.delete_referenced_row(
            site.id, ReferenceKind.LOCATION, target.id, strategy=DeleteStrategy.CASCADE
        )

        assert result.strategy_used == DeleteStrategy.CASCADE
        assert result.usage.counts == {"source": 1, "destination": 2, "installation": 0}
        assert result.deleted == {"source": 1, "destination": 1, "installation": 0}
        assert await count_rows(session_factory, Label, Label.site_id == site.id) == 1
        assert await count_rows(session_factory, Label, Label.id == kept.id) == 1

    @pytest.mark.asyncio
    async def test_unused_row_reports_auto(self, lifecycle, session_factory, site, make_location):
        """Zero usage deletes directly whatever strategy was asked for."""
        unused = await make_location(site.id)
        spare = await make_location(site.id)

        cascaded = await lifecycle.delete_referenced_row(
            site.id, ReferenceKind.LOCATION, unused.id, strategy=DeleteStrategy.CASCADE
        )
        assert cascaded.strategy_used == DeleteStrategy.AUTO
        assert cascaded.usage.total == 0
        assert cascaded.deleted == {}

        other = await make_location(site.id)
        reassigned = await lifecycle.delete_referenced_row(
            site.id,
            ReferenceKind.LOCATION,
            other.id,
            strategy=DeleteStrategy.REASSIGN,
            replacement_id=spare.id,
        )
        assert reassigned.strategy_used == DeleteStrategy.AUTO
        assert reassigned.replacement_id is None
        assert await count_rows(session_factory, SiteLocation, SiteLocation.site_id == site.id) == 1


class TestReplacementValidation:
    """Reassign needs a distinct replacement in the same site."""

    @pytest.mark.asyncio
    async def test_missing_replacement(self, lifecycle, site, make_location):
        target = await make_location(site.id)

        with pytest.raises(InvalidReplacement):
            await lifecycle.delete_referenced_row(
                site.id, ReferenceKind.LOCATION, target.id, strategy=DeleteStrategy.REASSIGN
            )

    @pytest.mark.asyncio
    async def test_replacement_is_target(self, lifecycle, site, make_location):
        target = await make_location(site.id)

        with pytest.raises(InvalidReplacement):
            await lifecycle.delete_referenced_row(
                site.id,
                ReferenceKind.LOCATION,
                target.id,
                strategy=DeleteStrategy.REASSIGN,
                replacement_id=target.id,
            )

    @pytest.mark.asyncio
    async def test_replacement_in_other_site(
        self, lifecycle, session_factory, site, other_site, make_location
    ):
        """A replacement from another site is rejected and nothing changes."""
        target = await make_location(site.id)
        foreign = await make_location(other_site.id)
        other = await make_location(site.id)
        await make_label(lifecycle, site.id, target, other)

        with pytest.raises(InvalidReplacement):
            await lifecycle.delete_referenced_row(
                site.id,
                ReferenceKind.LOCATION,
                target.id,
                strategy=DeleteStrategy.REASSIGN,
                replacement_id=foreign.id,
            )

        assert await count_rows(session_factory, Label, Label.source_location_id == target.id) == 1


class TestTargetLookup:
    """Targets must exist in the requested site."""

    @pytest.mark.asyncio
    async def test_missing_row(self, lifecycle, site):
        with pytest.raises(NotFound):
            await lifecycle.delete_referenced_row(site.id, ReferenceKind.LOCATION, 9999)

    @pytest.mark.asyncio
    async def test_row_of_other_site(self, lifecycle, session_factory, site, other_site, make_location):
        """Another site's row is reported missing and left alone."""
        foreign = await make_location(other_site.id)

        with pytest.raises(NotFound):
            await lifecycle.delete_referenced_row(
                site.id, ReferenceKind.LOCATION, foreign.id, strategy=DeleteStrategy.CASCADE
            )

        assert await count_rows(session_factory, SiteLocation, SiteLocation.id == foreign.id) == 1


class TestCatalogStrategies:
    """Deleting catalog rows."""

    @pytest.mark.asyncio
    async def test_cascade_cable_type_removes_labels(
        self, lifecycle, session_factory, site, make_location, make_cable_type
    ):
        """Cascading a cable type removes the four labels using it."""
        cable_type = await make_cable_type(site.id)
        a = await make_location(site.id)
        b = await make_location(site.id)
        for _ in range(4):
            await make_label(lifecycle, site.id, a, b, cable_type)

        result = await lifecycle.delete_referenced_row(
            site.id, ReferenceKind.CABLE_TYPE, cable_type.id, strategy=DeleteStrategy.CASCADE
        )

        assert result.strategy_used == DeleteStrategy.CASCADE
        assert result.usage.counts == {"labels": 4}
        assert result.deleted == {"labels": 4}
        assert await count_rows(session_factory, Label, Label.site_id == site.id) == 0

    @pytest.mark.asyncio
    async def test_cascade_sid_type_removes_sid_children(
        self, lifecycle, session_factory, site
    ):
        """SIDs removed by a cascade take their NICs and notes with them."""
        sid_type = await lifecycle.create_record(site.id, "sid_type", {"name": "Server"})
        sid = await lifecycle.create_sid(site.id, SidCreate(sid_type_id=sid_type.id))
        await lifecycle.add_nic(site.id, sid.id, NicCreate(name="eth0"))
        await lifecycle.add_note(site.id, sid.id, NoteCreate(note_text="racked"))

        result = await lifecycle.delete_referenced_row(
            site.id, ReferenceKind.SID_TYPE, sid_type.id, strategy=DeleteStrategy.CASCADE
        )

        assert result.deleted == {"sids": 1}
        assert await count_rows(session_factory, Sid, Sid.site_id == site.id) == 0
        assert await count_rows(session_factory, SidNic, SidNic.sid_id == sid.id) == 0
        assert await count_rows(session_factory, SidNote, SidNote.sid_id == sid.id) == 0

    @pytest.mark.asyncio
    async def test_reassign_vlan_moves_nics(self, lifecycle, session_factory, site):
        """NICs follow a VLAN reassignment."""
        old = await lifecycle.create_catalog_entry(
            site.id, ReferenceKind.VLAN, VlanCreate(name="mgmt", vlan_id=10)
        )
        new = await lifecycle.create_catalog_entry(
            site.id, ReferenceKind.VLAN, VlanCreate(name="mgmt-new", vlan_id=20)
        )
        sid = await lifecycle.create_sid(site.id, SidCreate())
        await lifecycle.add_nic(site.id, sid.id, NicCreate(name="eth0", site_vlan_id=old.id))

        result = await lifecycle.delete_referenced_row(
            site.id,
            ReferenceKind.VLAN,
            old.id,
            strategy=DeleteStrategy.REASSIGN,
            replacement_id=new.id,
        )

        assert result.reassigned == {"nics": 1}
        assert await count_rows(session_factory, SidNic, SidNic.site_vlan_id == new.id) == 1
        assert await count_rows(session_factory, SiteVlan, SiteVlan.id == old.id) == 0


class TestAtomicity:
    """A failed transaction leaves no partial deletion."""

    @pytest.mark.asyncio
    async def test_abort_after_cascade_restores_everything(
        self, lifecycle, session_factory, site, make_location
    ):
        target = await make_location(site.id)
        other = await make_location(site.id)
        await make_label(lifecycle, site.id, target, other)
        await make_label(lifecycle, site.id, other, target)

        with pytest.raises(RuntimeError):
            async with lifecycle.transaction() as db:
                await DeletionEngine(db).delete(
                    site.id, ReferenceKind.LOCATION, target.id, strategy=DeleteStrategy.CASCADE
                )
                raise RuntimeError("connection lost")

        assert await count_rows(session_factory, SiteLocation, SiteLocation.id == target.id) == 1
        assert await count_rows(session_factory, Label, Label.site_id == site.id) == 2
