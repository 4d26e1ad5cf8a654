"""repair (page_id, language) uniqueness on databases created outside migrations

Revision ID: 0002_repair_layout_unique
Revises: 0001_initial_schema
Create Date: 2026-02-03 14:05:00

"""
from alembic import op

from sitecms.utils.schema import repair_layout_uniqueness

# revision identifiers, used by Alembic.
revision = '0002_repair_layout_unique'
down_revision = '0001_initial_schema'
branch_labels = None
depends_on = None


def upgrade():
    repair_layout_uniqueness(op.get_bind())


def downgrade():
    pass
