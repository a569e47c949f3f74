"""create_users_profiles_links_themes

Revision ID: 5b1d0c3e7a21
Revises:
Create Date: 2025-06-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5b1d0c3e7a21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONDocument = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  comment='Timestamp when record was created (UTC)'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  comment='Timestamp when record was last updated (UTC)'),
    ]


def upgrade() -> None:
    """
    Create the account and public page tables.

    1. users    - accounts, unique email and slug
    2. profiles - one per user_id
    3. links    - many per user_id, ordered by "order"
    4. themes   - one per user_id, nested groups as JSON(B)
    """

    # ================================
    # users
    # ================================
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False,
                  comment='Tagged user identifier (usr_<hex>)'),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_slug'), 'users', ['slug'], unique=True)

    # ================================
    # profiles
    # ================================
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('bio', sa.String(length=500), nullable=False),
        sa.Column('avatar_url', sa.String(length=2048), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('secondary_bg', sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_profiles')),
        sa.UniqueConstraint('user_id', name=op.f('uq_profiles_user_id')),
    )

    # ================================
    # links
    # ================================
    op.create_table(
        'links',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=100), nullable=False),
        sa.Column('client_id', sa.String(length=100), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_links')),
    )
    op.create_index(op.f('ix_links_user_id'), 'links', ['user_id'])

    # ================================
    # themes
    # ================================
    op.create_table(
        'themes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=100), nullable=False),
        sa.Column('color_theme', sa.String(length=50), nullable=False),
        sa.Column('gradient', sa.String(length=50), nullable=False),
        sa.Column('pattern', sa.String(length=50), nullable=False),
        sa.Column('pattern_color', sa.String(length=50), nullable=False),
        sa.Column('font', sa.String(length=50), nullable=False),
        sa.Column('font_colors', JSONDocument, nullable=False),
        sa.Column('button_style', sa.String(length=50), nullable=False),
        sa.Column('border_radius', sa.String(length=50), nullable=False),
        sa.Column('background_color', sa.String(length=50), nullable=False),
        sa.Column('background_gradient', sa.String(length=50), nullable=False),
        sa.Column('background_image', sa.String(length=2048), nullable=False),
        sa.Column('effects', JSONDocument, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_themes')),
        sa.UniqueConstraint('user_id', name=op.f('uq_themes_user_id')),
    )


def downgrade() -> None:
    op.drop_table('themes')
    op.drop_index(op.f('ix_links_user_id'), table_name='links')
    op.drop_table('links')
    op.drop_table('profiles')
    op.drop_index(op.f('ix_users_slug'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
