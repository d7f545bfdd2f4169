"""create users, tests, results and practice sessions

Revision ID: 4c7e2a91d3b0
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c7e2a91d3b0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

role_enum = sa.Enum('user', 'admin', 'super_admin', 'content_admin', name='roleenum')
test_type_enum = sa.Enum('full-mock', 'practice', 'mini', 'daily', name='mocktesttypeenum')
test_status_enum = sa.Enum('draft', 'published', 'archived', name='mockteststatusenum')
practice_type_enum = sa.Enum('full-test', 'section', 'question', 'practice', name='practicetypeenum')
practice_status_enum = sa.Enum('started', 'completed', 'paused', 'abandoned', name='practicestatusenum')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', role_enum, nullable=False),
        sa.Column('target_band', sa.Float(), nullable=True),
        sa.Column('current_level', sa.String(length=20), nullable=True),
        sa.Column('exam_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'tests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('type', test_type_enum, nullable=False),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('status', test_status_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tests_id'), 'tests', ['id'], unique=False)

    op.create_table(
        'results',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('test_id', sa.Integer(), nullable=False),
        sa.Column('answers', sa.JSON(), nullable=False),
        sa.Column('score_raw', sa.Integer(), nullable=False),
        sa.Column('score_band', sa.Float(), nullable=False),
        sa.Column('score_percentage', sa.Float(), nullable=False),
        sa.Column('section_results', sa.JSON(), nullable=False),
        sa.Column('time_taken', sa.Integer(), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['test_id'], ['tests.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_results_id'), 'results', ['id'], unique=False)
    op.create_index(op.f('ix_results_test_id'), 'results', ['test_id'], unique=False)
    op.create_index('ix_results_user_submitted', 'results', ['user_id', 'submitted_at'], unique=False)
    op.create_index('ix_results_submitted_at', 'results', ['submitted_at'], unique=False)

    op.create_table(
        'practice_sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('test_id', sa.Integer(), nullable=True),
        sa.Column('section_id', sa.Integer(), nullable=True),
        sa.Column('question_id', sa.Integer(), nullable=True),
        sa.Column('type', practice_type_enum, nullable=False),
        sa.Column('skill', sa.String(length=20), nullable=True),
        sa.Column('status', practice_status_enum, nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('answers', sa.JSON(), nullable=False),
        sa.Column('submitted_answers', sa.JSON(), nullable=True),
        sa.Column('score_raw', sa.Integer(), nullable=True),
        sa.Column('score_band', sa.Float(), nullable=True),
        sa.Column('score_percentage', sa.Float(), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('device_info', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['test_id'], ['tests.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_practice_sessions_id'), 'practice_sessions', ['id'], unique=False)
    op.create_index(op.f('ix_practice_sessions_test_id'), 'practice_sessions', ['test_id'], unique=False)
    op.create_index(op.f('ix_practice_sessions_skill'), 'practice_sessions', ['skill'], unique=False)
    op.create_index(op.f('ix_practice_sessions_status'), 'practice_sessions', ['status'], unique=False)
    op.create_index('ix_practice_sessions_user_created', 'practice_sessions', ['user_id', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('practice_sessions')
    op.drop_table('results')
    op.drop_table('tests')
    op.drop_table('users')
    practice_status_enum.drop(op.get_bind(), checkfirst=True)
    practice_type_enum.drop(op.get_bind(), checkfirst=True)
    test_status_enum.drop(op.get_bind(), checkfirst=True)
    test_type_enum.drop(op.get_bind(), checkfirst=True)
    role_enum.drop(op.get_bind(), checkfirst=True)
