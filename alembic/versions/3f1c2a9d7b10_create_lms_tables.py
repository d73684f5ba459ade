"""create_lms_tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - Create users, library, modules, contents and enrollments."""

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=50), nullable=True),
        sa.Column('trainee_id', sa.String(length=50), nullable=True),
        sa.Column('profile_picture', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('trainee_id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)

    op.create_table(
        'admin_contents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=512), nullable=True),
        sa.Column('video_url', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'modules',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('instructor_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['instructor_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_modules_instructor_id'), 'modules', ['instructor_id'], unique=False
    )

    op.create_table(
        'instructor_contents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('module_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=512), nullable=True),
        sa.Column('video', sa.String(length=1024), nullable=True),
        sa.Column('admin_content_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['module_id'], ['modules.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'module_id',
            'admin_content_id',
            name='uq_instructor_contents_module_admin',
        ),
    )
    op.create_index(
        op.f('ix_instructor_contents_module_id'),
        'instructor_contents',
        ['module_id'],
        unique=False,
    )

    op.create_table(
        'enrollments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('content_id', sa.Integer(), nullable=False),
        sa.Column('trainee_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['content_id'], ['instructor_contents.id']),
        sa.ForeignKeyConstraint(['trainee_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'content_id', 'trainee_id', name='uq_enrollments_content_trainee'
        ),
    )
    op.create_index(
        op.f('ix_enrollments_content_id'), 'enrollments', ['content_id'], unique=False
    )
    op.create_index(
        op.f('ix_enrollments_trainee_id'), 'enrollments', ['trainee_id'], unique=False
    )


def downgrade() -> None:
    """Downgrade schema - Drop LMS tables, children first."""
    op.drop_index(op.f('ix_enrollments_trainee_id'), table_name='enrollments')
    op.drop_index(op.f('ix_enrollments_content_id'), table_name='enrollments')
    op.drop_table('enrollments')
    op.drop_index(
        op.f('ix_instructor_contents_module_id'), table_name='instructor_contents'
    )
    op.drop_table('instructor_contents')
    op.drop_index(op.f('ix_modules_instructor_id'), table_name='modules')
    op.drop_table('modules')
    op.drop_table('admin_contents')
    op.drop_index(op.f('ix_users_role'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
