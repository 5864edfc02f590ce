"""create training tables

Revision ID: 5c1e0a7d2b94
Revises:
Create Date: 2026-10-18 10:12:44.508231

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c1e0a7d2b94'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

role_enum = sa.Enum('admin', 'manager', 'trainer', 'employee', name='roleenum')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('role', role_enum, nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_last_name'), 'users', ['last_name'], unique=False)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)

    op.create_table(
        'training_program',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('manager_id', sa.Integer(), nullable=False),
        sa.Column('deadline', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['manager_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_training_program_id'), 'training_program', ['id'], unique=False)
    op.create_index(op.f('ix_training_program_title'), 'training_program', ['title'], unique=False)
    op.create_index(op.f('ix_training_program_manager_id'), 'training_program', ['manager_id'], unique=False)
    op.create_index(op.f('ix_training_program_is_active'), 'training_program', ['is_active'], unique=False)

    op.create_table(
        'training_session',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('program_id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=True),
        sa.Column('session_datetime', sa.DateTime(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['program_id'], ['training_program.id']),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_training_session_id'), 'training_session', ['id'], unique=False)
    op.create_index(op.f('ix_training_session_program_id'), 'training_session', ['program_id'], unique=False)
    op.create_index(op.f('ix_training_session_trainer_id'), 'training_session', ['trainer_id'], unique=False)
    op.create_index(op.f('ix_training_session_is_active'), 'training_session', ['is_active'], unique=False)

    op.create_table(
        'program_assignment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('program_id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('assigned_by_manager_id', sa.Integer(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['program_id'], ['training_program.id']),
        sa.ForeignKeyConstraint(['employee_id'], ['users.id']),
        sa.ForeignKeyConstraint(['assigned_by_manager_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('program_id', 'employee_id', name='uq_program_assignment_program_employee')
    )
    op.create_index(op.f('ix_program_assignment_id'), 'program_assignment', ['id'], unique=False)
    op.create_index(op.f('ix_program_assignment_program_id'), 'program_assignment', ['program_id'], unique=False)
    op.create_index(op.f('ix_program_assignment_employee_id'), 'program_assignment', ['employee_id'], unique=False)

    op.create_table(
        'session_enrollment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('completion_date', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['training_session.id']),
        sa.ForeignKeyConstraint(['employee_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'employee_id', name='uq_session_enrollment_session_employee')
    )
    op.create_index(op.f('ix_session_enrollment_id'), 'session_enrollment', ['id'], unique=False)
    op.create_index(op.f('ix_session_enrollment_session_id'), 'session_enrollment', ['session_id'], unique=False)
    op.create_index(op.f('ix_session_enrollment_employee_id'), 'session_enrollment', ['employee_id'], unique=False)

    op.create_table(
        'token_denylist',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('jti', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('exp', sa.DateTime(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_token_denylist_id'), 'token_denylist', ['id'], unique=False)
    op.create_index(op.f('ix_token_denylist_jti'), 'token_denylist', ['jti'], unique=True)
    op.create_index(op.f('ix_token_denylist_user_id'), 'token_denylist', ['user_id'], unique=False)
    op.create_index(op.f('ix_token_denylist_exp'), 'token_denylist', ['exp'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_token_denylist_exp'), table_name='token_denylist')
    op.drop_index(op.f('ix_token_denylist_user_id'), table_name='token_denylist')
    op.drop_index(op.f('ix_token_denylist_jti'), table_name='token_denylist')
    op.drop_index(op.f('ix_token_denylist_id'), table_name='token_denylist')
    op.drop_table('token_denylist')
    op.drop_table('session_enrollment')
    op.drop_table('program_assignment')
    op.drop_table('training_session')
    op.drop_table('training_program')
    op.drop_table('users')
    role_enum.drop(op.get_bind(), checkfirst=True)
