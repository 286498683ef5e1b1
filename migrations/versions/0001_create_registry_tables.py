"""create registry tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'auth_tokens',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('access_token', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_auth_tokens_author', 'auth_tokens', ['author'], unique=False)

    op.create_table(
        'modules',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('latest', sa.String(length=64), nullable=True),
        sa.Column('featured', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('search_vector', postgresql.TSVECTOR(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('author', 'name', name='uq_modules_author_name'),
    )
    op.create_index('idx_modules_featured', 'modules', ['featured'], unique=False)
    op.execute("CREATE INDEX idx_modules_search_vector ON modules USING GIN(search_vector);")

    # Keep search_vector in sync with name and description
    op.execute("""
        CREATE OR REPLACE FUNCTION modules_search_vector_update()
        RETURNS trigger AS $$
        BEGIN
            NEW.search_vector := to_tsvector('english', coalesce(NEW.name, '') || ' ' || coalesce(NEW.description, ''));
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER modules_search_vector_update_trigger
            BEFORE INSERT OR UPDATE OF name, description ON modules
            FOR EACH ROW EXECUTE FUNCTION modules_search_vector_update();
    """)

    op.create_table(
        'releases',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('module_id', sa.Integer(), nullable=False),
        sa.Column('version', sa.String(length=64), nullable=False),
        sa.Column('downloads', sa.Integer(), server_default='0', nullable=False),
        sa.Column('code', sa.Text(), nullable=False),
        sa.Column('published', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['module_id'], ['modules.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('module_id', 'version', name='uq_releases_module_version'),
    )
    op.create_index('idx_releases_published', 'releases', ['published'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_releases_published', table_name='releases')
    op.drop_table('releases')

    op.execute("DROP TRIGGER IF EXISTS modules_search_vector_update_trigger ON modules;")
    op.execute("DROP FUNCTION IF EXISTS modules_search_vector_update();")
    op.execute("DROP INDEX IF EXISTS idx_modules_search_vector;")
    op.drop_index('idx_modules_featured', table_name='modules')
    op.drop_table('modules')

    op.drop_index('idx_auth_tokens_author', table_name='auth_tokens')
    op.drop_table('auth_tokens')
