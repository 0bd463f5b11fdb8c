"""vendors, queues and queue entries"""

from alembic import op
import sqlalchemy as sa


revision = "0001_queue_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "vendors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("cuisine", sa.String(length=100), nullable=True),
        sa.Column(
            "vendor_type",
            sa.String(length=20),
            nullable=False,
            server_default="truck",
        ),
        sa.Column("is_online", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_stationary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_fixed_address", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("open_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "queues",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("vendor_id", sa.Integer(), sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "current_serving_number",
            sa.Integer(),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_queues_vendor_id", "queues", ["vendor_id"])
    op.create_index(
        "uq_queues_active_vendor",
        "queues",
        ["vendor_id"],
        unique=True,
        sqlite_where=sa.text("is_active = 1"),
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "queue_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("queue_id", sa.Integer(), sa.ForeignKey("queues.id"), nullable=False),
        sa.Column(
            "customer_name",
            sa.String(length=255),
            nullable=False,
            server_default="Customer",
        ),
        sa.Column("queue_number", sa.Integer(), nullable=False),
        sa.Column("items_json", sa.Text(), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "status",
            sa.String(length=20),
            nullable=False,
            server_default="waiting",
        ),
        sa.Column("estimated_wait", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("queue_id", "queue_number", name="uq_queue_entries_number"),
    )
    op.create_index("ix_queue_entries_queue_id", "queue_entries", ["queue_id"])


def downgrade():
    op.drop_index("ix_queue_entries_queue_id", table_name="queue_entries")
    op.drop_table("queue_entries")
    op.drop_index("uq_queues_active_vendor", table_name="queues")
    op.drop_index("ix_queues_vendor_id", table_name="queues")
    op.drop_table("queues")
    op.drop_table("vendors")
