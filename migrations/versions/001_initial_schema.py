"""Initial schema: delivery orders and vehicles.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── delivery_orders ───────────────────────────────────────────────
    op.create_table(
        "delivery_orders",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("order_id", sa.String(50), unique=True, nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("package_weight", sa.Integer, nullable=False),
        sa.Column(
            "priority",
            sa.Enum("HIGH", "MEDIUM", "LOW", name="priority"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_orders_priority", "delivery_orders", ["priority"])

    # ── vehicles ──────────────────────────────────────────────────────
    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("vehicle_id", sa.String(50), unique=True, nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("current_latitude", sa.Float, nullable=False),
        sa.Column("current_longitude", sa.Float, nullable=False),
        sa.Column("current_address", sa.String(500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("vehicles")
    op.drop_index("idx_orders_priority", table_name="delivery_orders")
    op.drop_table("delivery_orders")
    op.execute("DROP TYPE IF EXISTS priority")
