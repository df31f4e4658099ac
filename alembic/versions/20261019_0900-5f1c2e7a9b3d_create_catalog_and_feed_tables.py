"""Create catalog and supplier feed tables

Revision ID: 5f1c2e7a9b3d
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '5f1c2e7a9b3d'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Products and categories keyed by natural keys, plus feed configuration"""

    op.create_table('categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('parent_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['parent_id'], ['categories.id'], ),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    op.create_table('products',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('sku', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('price_dropship', sa.Numeric(12, 2), nullable=True),
        sa.Column('in_stock', sa.Boolean(), server_default='FALSE', nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('gallery_json', sa.JSON(), nullable=True),
        sa.Column('category_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ),
    )
    op.create_index('ix_products_sku', 'products', ['sku'], unique=True)

    feed_mode = sa.Enum('FULL_IMPORT', 'STOCK_ONLY', name='feedmode')
    op.create_table('supplier_feeds',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('item_path', sa.String(), nullable=False),
        sa.Column('sku_path', sa.String(), nullable=True),
        sa.Column('name_path', sa.String(), nullable=True),
        sa.Column('description_path', sa.String(), nullable=True),
        sa.Column('price_path', sa.String(), nullable=True),
        sa.Column('stock_path', sa.String(), nullable=True),
        sa.Column('photo_path', sa.String(), nullable=True),
        sa.Column('category_path', sa.String(), nullable=True),
        sa.Column('category_list_path', sa.String(), nullable=True),
        sa.Column('mode', feed_mode, server_default='STOCK_ONLY', nullable=False),
        sa.Column('vendor_profile', sa.String(), server_default='generic', nullable=False),
        sa.Column('enabled', sa.Boolean(), server_default='TRUE', nullable=False),
        sa.Column('last_run', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('last_status', sa.String(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_supplier_feeds_enabled', 'supplier_feeds', ['enabled'])


def downgrade() -> None:
    op.drop_index('idx_supplier_feeds_enabled', table_name='supplier_feeds')
    op.drop_table('supplier_feeds')
    sa.Enum(name='feedmode').drop(op.get_bind(), checkfirst=True)
    op.drop_index('ix_products_sku', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_categories_slug', table_name='categories')
    op.drop_table('categories')
