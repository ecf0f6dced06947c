"""add game state version and one answer per participant and question

Revision ID: b7e2d4f1c8a3
Revises: a1f3c9d2e4b7
Create Date: 2026-10-14 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b7e2d4f1c8a3'
down_revision = 'a1f3c9d2e4b7'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        'game_state',
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    )
    op.alter_column('game_state', 'version', server_default=None)
    # Keep the earliest answer where duplicates slipped in
    op.execute(
        """
        DELETE FROM answers a
        USING answers b
        WHERE a.participant_id = b.participant_id
          AND a.question_id = b.question_id
          AND (a.answered_at, a.id) > (b.answered_at, b.id)
        """
    )
    op.create_unique_constraint(
        'uq_answers_participant_question', 'answers', ['participant_id', 'question_id']
    )


def downgrade() -> None:
    op.drop_constraint('uq_answers_participant_question', 'answers', type_='unique')
    op.drop_column('game_state', 'version')
