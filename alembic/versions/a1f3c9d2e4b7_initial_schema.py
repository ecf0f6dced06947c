"""initial wedding quiz schema

Revision ID: a1f3c9d2e4b7
Revises:
Create Date: 2026-10-12 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = 'a1f3c9d2e4b7'
down_revision = None
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    op.create_table(
        'participants',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('code', sa.String(length=8), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('nickname', sa.String(length=20), nullable=True),
        sa.Column('group_type', sa.String(), nullable=False),
        sa.Column('seat_number', sa.String(), nullable=True),
        sa.Column('message', sa.String(), nullable=True),
        sa.Column('message_image_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('nickname'),
    )
    op.create_index('ix_participants_code', 'participants', ['code'], unique=True)

    op.create_table(
        'user_sessions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('participant_id', sa.String(), sa.ForeignKey('participants.id'), nullable=False),
        sa.Column('session_token', sa.String(length=128), nullable=False),
        sa.Column('last_active', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_user_sessions_participant_id', 'user_sessions', ['participant_id'])
    op.create_index('ix_user_sessions_session_token', 'user_sessions', ['session_token'], unique=True)
    op.create_index('ix_user_sessions_last_active', 'user_sessions', ['last_active'])

    op.create_table(
        'questions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('question_number', sa.Integer(), nullable=False),
        sa.Column('question_text', sa.String(), nullable=False),
        sa.Column('question_type', sa.String(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('time_limit_seconds', sa.Integer(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('explanation_text', sa.String(), nullable=True),
        sa.Column('explanation_image_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_questions_question_number', 'questions', ['question_number'], unique=True)

    op.create_table(
        'choices',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('question_id', sa.String(), sa.ForeignKey('questions.id'), nullable=False),
        sa.Column('choice_text', sa.String(), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
    )
    op.create_index('ix_choices_question_id', 'choices', ['question_id'])

    op.create_table(
        'game_state',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('current_state', sa.String(), nullable=False),
        sa.Column('current_question_id', sa.String(), nullable=True),
        sa.Column('current_question_number', sa.Integer(), nullable=False),
        sa.Column('answers_closed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('results_shown_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'admin_actions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('action_type', sa.String(), nullable=False),
        sa.Column('previous_state', JSONType, nullable=True),
        sa.Column('new_state', JSONType, nullable=True),
        sa.Column('performed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('undone', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_admin_actions_performed_at', 'admin_actions', ['performed_at'])

    op.create_table(
        'answers',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('participant_id', sa.String(), sa.ForeignKey('participants.id'), nullable=False),
        sa.Column('question_id', sa.String(), sa.ForeignKey('questions.id'), nullable=False),
        sa.Column('choice_id', sa.String(), nullable=True),
        sa.Column('choice_ids', JSONType, nullable=True),
        sa.Column('answer_text', sa.String(), nullable=True),
        sa.Column('is_correct', sa.Boolean(), nullable=False),
        sa.Column('points_earned', sa.Integer(), nullable=False),
        sa.Column('answered_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_answers_participant_id', 'answers', ['participant_id'])
    op.create_index('ix_answers_question_id', 'answers', ['question_id'])
    op.create_index('ix_answers_answered_at', 'answers', ['answered_at'])


def downgrade() -> None:
    op.drop_table('answers')
    op.drop_table('admin_actions')
    op.drop_table('game_state')
    op.drop_table('choices')
    op.drop_table('questions')
    op.drop_table('user_sessions')
    op.drop_table('participants')
