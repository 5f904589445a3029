"""Initial database schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    ]


def _site_fk() -> sa.Column:
    return sa.Column(
        "site_id",
        sa.Integer,
        sa.ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def upgrade() -> None:
    # Sites
    op.create_table(
        "sites",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), unique=True, nullable=False),
        sa.Column("code", sa.String(20), unique=True, nullable=False, index=True),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
    )

    # Sequence counters
    op.create_table(
        "site_counters",
        sa.Column(
            "site_id",
            sa.Integer,
            sa.ForeignKey("sites.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("kind", sa.String(32), primary_key=True),
        sa.Column("next_value", sa.Integer, nullable=False, server_default="1"),
    )

    # Locations
    op.create_table(
        "site_locations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column("template_type", sa.String(16), nullable=False, server_default="DATACENTRE"),
        sa.Column("floor", sa.String(50), nullable=False),
        sa.Column("suite", sa.String(50), nullable=True),
        sa.Column("row", sa.String(50), nullable=True),
        sa.Column("rack", sa.String(50), nullable=True),
        sa.Column("area", sa.String(64), nullable=True),
        sa.Column("label", sa.String(255), nullable=True),
        sa.Column("coords_key", sa.String(300), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "coords_key", name="uq_site_locations_coords"),
    )

    # Catalogs
    op.create_table(
        "cable_types",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "name", name="uq_cable_types_site_name"),
    )

    op.create_table(
        "sid_types",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "name", name="uq_sid_types_site_name"),
    )

    op.create_table(
        "sid_device_models",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column("manufacturer", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "name", name="uq_sid_device_models_site_name"),
    )

    op.create_table(
        "sid_cpu_models",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column("manufacturer", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("cpu_cores", sa.Integer, nullable=True),
        sa.Column("cpu_threads", sa.Integer, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "name", name="uq_sid_cpu_models_site_name"),
    )

    op.create_table(
        "site_vlans",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column("vlan_id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "vlan_id", name="uq_site_vlans_site_vlan"),
    )

    # Labels
    op.create_table(
        "labels",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column("ref_number", sa.Integer, nullable=False),
        sa.Column("ref_string", sa.String(64), nullable=False, index=True),
        sa.Column(
            "source_location_id",
            sa.Integer,
            sa.ForeignKey("site_locations.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "destination_location_id",
            sa.Integer,
            sa.ForeignKey("site_locations.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "cable_type_id", sa.Integer, sa.ForeignKey("cable_types.id"), nullable=True, index=True
        ),
        sa.Column("type", sa.String(32), nullable=False, server_default="cable"),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "ref_number", name="uq_labels_site_ref"),
    )

    # SIDs
    op.create_table(
        "sids",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column("sid_number", sa.Integer, nullable=False),
        sa.Column("sid_type_id", sa.Integer, sa.ForeignKey("sid_types.id"), nullable=True, index=True),
        sa.Column(
            "device_model_id",
            sa.Integer,
            sa.ForeignKey("sid_device_models.id"),
            nullable=True,
            index=True,
        ),
        sa.Column(
            "cpu_model_id", sa.Integer, sa.ForeignKey("sid_cpu_models.id"), nullable=True, index=True
        ),
        sa.Column(
            "location_id", sa.Integer, sa.ForeignKey("site_locations.id"), nullable=True, index=True
        ),
        sa.Column("rack_u", sa.String(16), nullable=True),
        sa.Column("hostname", sa.String(255), nullable=True, index=True),
        sa.Column("serial_number", sa.String(255), nullable=True),
        sa.Column("status", sa.String(64), nullable=True),
        sa.Column("cpu_count", sa.Integer, nullable=True),
        sa.Column("ram_gb", sa.Numeric(10, 2), nullable=True),
        sa.Column("os_name", sa.String(255), nullable=True),
        sa.Column("os_version", sa.String(255), nullable=True),
        sa.Column("mgmt_ip", sa.String(64), nullable=True),
        sa.Column("mgmt_mac", sa.String(64), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "sid_number", name="uq_sids_site_number"),
    )

    op.create_table(
        "sid_nics",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column(
            "sid_id", sa.Integer, sa.ForeignKey("sids.id", ondelete="CASCADE"), nullable=False, index=True
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("mac_address", sa.String(64), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column(
            "site_vlan_id", sa.Integer, sa.ForeignKey("site_vlans.id"), nullable=True, index=True
        ),
        *_timestamps(),
    )

    op.create_table(
        "sid_notes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _site_fk(),
        sa.Column(
            "sid_id", sa.Integer, sa.ForeignKey("sids.id", ondelete="CASCADE"), nullable=False, index=True
        ),
        sa.Column("type", sa.String(16), nullable=False, server_default="NOTE"),
        sa.Column("note_text", sa.Text, nullable=False),
        sa.Column("pinned", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("sid_notes")
    op.drop_table("sid_nics")
    op.drop_table("sids")
    op.drop_table("labels")
    op.drop_table("site_vlans")
    op.drop_table("sid_cpu_models")
    op.drop_table("sid_device_models")
    op.drop_table("sid_types")
    op.drop_table("cable_types")
    op.drop_table("site_locations")
    op.drop_table("site_counters")
    op.drop_table("sites")
