"""create menu items

Revision ID: 202610010900
Revises:
Create Date: 2026-10-01 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "202610010900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "menu_items",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(length=1000), server_default="", nullable=False),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("available", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.CheckConstraint("price >= 0", name="ck_menu_items_price_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_menu_items_available", "menu_items", ["available"], unique=False)
    op.create_index(
        "ix_menu_items_category_name", "menu_items", ["category", "name"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_menu_items_category_name", table_name="menu_items")
    op.drop_index("ix_menu_items_available", table_name="menu_items")
    op.drop_table("menu_items")
