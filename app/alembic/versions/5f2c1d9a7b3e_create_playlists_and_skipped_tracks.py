"""Create playlists, skipped_tracks and skipped_track_history

Revision ID: 5f2c1d9a7b3e
Revises:
Create Date: 2026-10-17 10:12:31.118402

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5f2c1d9a7b3e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'playlists',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('skip_threshold', sa.Integer(), nullable=True),
        sa.Column('ignore_initial_skips', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('auto_cleanup_limit', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'skipped_tracks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('track_id', sa.String(length=64), nullable=False),
        sa.Column('playlist_id', sa.String(length=128), nullable=False),
        sa.Column('skipped_date', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['playlist_id'], ['playlists.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('track_id', 'playlist_id', 'skipped_date', name='uq_skipped_track_event')
    )
    op.create_index('ix_skipped_tracks_track_id', 'skipped_tracks', ['track_id'])
    op.create_index('ix_skipped_tracks_playlist_id', 'skipped_tracks', ['playlist_id'])

    op.create_table(
        'skipped_track_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('track_id', sa.String(length=64), nullable=False),
        sa.Column('playlist_id', sa.String(length=128), nullable=False),
        sa.Column('skipped_date', sa.DateTime(), nullable=False),
        sa.Column('archived_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['playlist_id'], ['playlists.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_skipped_track_history_track_id', 'skipped_track_history', ['track_id'])
    op.create_index('ix_skipped_track_history_playlist_id', 'skipped_track_history', ['playlist_id'])


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_index('ix_skipped_track_history_playlist_id', table_name='skipped_track_history')
    op.drop_index('ix_skipped_track_history_track_id', table_name='skipped_track_history')
    op.drop_table('skipped_track_history')

    op.drop_index('ix_skipped_tracks_playlist_id', table_name='skipped_tracks')
    op.drop_index('ix_skipped_tracks_track_id', table_name='skipped_tracks')
    op.drop_table('skipped_tracks')

    op.drop_table('playlists')
