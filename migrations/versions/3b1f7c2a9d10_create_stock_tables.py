"""Create tenant, ingredient, product and recipe_line tables

Revision ID: 3b1f7c2a9d10
Revises:
Create Date: 2026-10-19 09:12:41.118204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b1f7c2a9d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'tenant',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('credential_hash', sa.String(length=255), nullable=False),
        sa.Column('business_type', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'ingredient',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit', sa.String(length=10), nullable=False),
        sa.Column('package_size', sa.Integer(), nullable=False),
        sa.Column('package_label', sa.String(length=50), nullable=True),
        sa.Column('package_price', sa.Integer(), nullable=True),
        sa.Column('min_stock_level', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity >= 0', name='ck_ingredient_quantity_non_negative'),
        sa.CheckConstraint('package_size >= 1', name='ck_ingredient_package_size_positive'),
        sa.CheckConstraint('package_price IS NULL OR package_price >= 0',
                           name='ck_ingredient_package_price_non_negative'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('ingredient', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_ingredient_tenant_id'), ['tenant_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_ingredient_name'), ['name'], unique=False)

    op.create_table(
        'product',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_product_price_non_negative'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('product', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_product_tenant_id'), ['tenant_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_product_name'), ['name'], unique=False)

    op.create_table(
        'recipe_line',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('ingredient_id', sa.Integer(), nullable=False),
        sa.Column('quantity_required', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity_required > 0', name='ck_recipe_line_quantity_positive'),
        sa.ForeignKeyConstraint(['product_id'], ['product.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredient.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('product_id', 'ingredient_id', name='uq_recipe_line_product_ingredient'),
    )
    with op.batch_alter_table('recipe_line', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_recipe_line_product_id'), ['product_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_recipe_line_ingredient_id'), ['ingredient_id'], unique=False)


def downgrade():
    op.drop_table('recipe_line')
    op.drop_table('product')
    op.drop_table('ingredient')
    op.drop_table('tenant')
