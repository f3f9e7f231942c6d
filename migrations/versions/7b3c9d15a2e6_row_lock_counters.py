"""courts.booking_version and invites.request_version lock counters

Revision ID: 7b3c9d15a2e6
Revises: e4f1a7c2b9d0
Create Date: 2026-10-20 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7b3c9d15a2e6'
down_revision = 'e4f1a7c2b9d0'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('courts', schema=None) as batch_op:
        batch_op.add_column(sa.Column('booking_version', sa.Integer(), server_default='0', nullable=False))

    with op.batch_alter_table('invites', schema=None) as batch_op:
        batch_op.add_column(sa.Column('request_version', sa.Integer(), server_default='0', nullable=False))


def downgrade():
    with op.batch_alter_table('invites', schema=None) as batch_op:
        batch_op.drop_column('request_version')

    with op.batch_alter_table('courts', schema=None) as batch_op:
        batch_op.drop_column('booking_version')
