"""Initial tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Managers
    op.create_table(
        'managers',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Seasons (standings snapshot per championship season)
    op.create_table(
        'seasons',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('championship', sa.String(), nullable=False),
        sa.Column('season_number', sa.Integer(), nullable=False),
        sa.Column('standings', postgresql.JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('championship', 'season_number', name='uq_seasons_championship_number')
    )

    # Matches
    op.create_table(
        'matches',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('championship', sa.String(), nullable=False),
        sa.Column('season', sa.Integer(), nullable=False),
        sa.Column('matchday', sa.Integer(), nullable=False),
        sa.Column('home_team', sa.String(), nullable=False),
        sa.Column('away_team', sa.String(), nullable=False),
        sa.Column('home_score', sa.Integer(), nullable=True),
        sa.Column('away_score', sa.Integer(), nullable=True),
        sa.Column('exempt_team', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_matches_context', 'matches', ['championship', 'season', 'matchday'])

    # Champions (palmares)
    op.create_table(
        'champions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('championship', sa.String(), nullable=False),
        sa.Column('season', sa.Integer(), nullable=False),
        sa.Column('champion_name', sa.String(), nullable=False),
        sa.Column('runner_up_name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('championship', 'season', name='uq_champions_championship_season')
    )

    # Pantheon (all-time ranking)
    op.create_table(
        'pantheon',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('manager_name', sa.String(), nullable=False),
        sa.Column('total_points', sa.Integer(), server_default='0', nullable=True),
        sa.Column('titles', sa.Integer(), server_default='0', nullable=True),
        sa.Column('runner_ups', sa.Integer(), server_default='0', nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('manager_name')
    )

    # Penalties
    op.create_table(
        'penalties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('championship', sa.String(), nullable=False),
        sa.Column('season', sa.Integer(), nullable=False),
        sa.Column('team_name', sa.String(), nullable=False),
        sa.Column('points', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'championship', 'season', 'team_name', name='uq_penalties_championship_season_team'
        )
    )


def downgrade() -> None:
    op.drop_table('penalties')
    op.drop_table('pantheon')
    op.drop_table('champions')
    op.drop_index('idx_matches_context', table_name='matches')
    op.drop_table('matches')
    op.drop_table('seasons')
    op.drop_table('managers')
