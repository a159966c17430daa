"""create game table

Revision ID: 5b7c1e9d2a40
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b7c1e9d2a40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'game' in set(insp.get_table_names()):
        return

    op.create_table(
        'game',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('board', sa.JSON(), nullable=False),
        sa.Column('current_player', sa.String(length=1), nullable=False),
        sa.Column('winner', sa.String(length=10), nullable=True),
        sa.Column('player_x_name', sa.String(length=255), nullable=True),
        sa.Column('player_o_name', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='waiting'),
        sa.Column('reset_requested_by', sa.String(length=1), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_game_status', 'game', ['status'])


def downgrade():
    op.drop_index('ix_game_status', table_name='game')
    op.drop_table('game')
