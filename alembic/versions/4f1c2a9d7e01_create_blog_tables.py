"""create_blog_tables

Revision ID: 4f1c2a9d7e01
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '4f1c2a9d7e01'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

login_type = sa.Enum('normal', 'social', name='login_type')


def upgrade() -> None:
    op.create_table(
        'tbl_user',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('fullname', sa.String(100), nullable=True),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('email', sa.String(100), nullable=False),
        sa.Column('password', sa.String(255), nullable=True),
        sa.Column('country_code', sa.String(10), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('profile_pic', sa.String(255), nullable=True),
        sa.Column('login_type', login_type, nullable=False, server_default='normal'),
        sa.Column('social_id', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_login', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('step', sa.SmallInteger(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tbl_user_id', 'tbl_user', ['id'])
    op.create_index('ix_tbl_user_username', 'tbl_user', ['username'], unique=True)
    op.create_index('ix_tbl_user_email', 'tbl_user', ['email'], unique=True)
    op.create_index('ix_tbl_user_phone', 'tbl_user', ['phone'], unique=True)

    op.create_table(
        'tbl_categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index('ix_tbl_categories_id', 'tbl_categories', ['id'])

    op.create_table(
        'tbl_posts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(255), nullable=True),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['author_id'], ['tbl_user.id']),
        sa.ForeignKeyConstraint(['category_id'], ['tbl_categories.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tbl_posts_id', 'tbl_posts', ['id'])
    op.create_index('ix_tbl_posts_author_id', 'tbl_posts', ['author_id'])
    op.create_index('ix_tbl_posts_category_id', 'tbl_posts', ['category_id'])
    op.create_index('ix_tbl_posts_is_deleted', 'tbl_posts', ['is_deleted'])

    op.create_table(
        'tbl_comments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['post_id'], ['tbl_posts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['author_id'], ['tbl_user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tbl_comments_id', 'tbl_comments', ['id'])
    op.create_index('ix_tbl_comments_post_id', 'tbl_comments', ['post_id'])
    op.create_index('ix_tbl_comments_author_id', 'tbl_comments', ['author_id'])


def downgrade() -> None:
    op.drop_table('tbl_comments')
    op.drop_table('tbl_posts')
    op.drop_table('tbl_categories')
    op.drop_table('tbl_user')
    login_type.drop(op.get_bind(), checkfirst=True)
