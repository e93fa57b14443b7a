"""Initial schema for staff users, tables, reservations, menu, orders and settings

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Staff accounts
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'token_blacklist',
        sa.Column('token_hash', sa.String(64), primary_key=True),
        sa.Column('blacklisted_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_token_blacklist_expires', 'token_blacklist', ['expires_at'])

    # Floor layout
    op.create_table(
        'tables',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('seats', sa.Integer(), nullable=False),
        sa.Column('position_x', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('position_y', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint('seats > 0', name='ck_tables_seats_positive'),
    )

    op.create_table(
        'reservations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('table_id', sa.Uuid(), sa.ForeignKey('tables.id', ondelete='CASCADE'), nullable=False),
        sa.Column('customer_name', sa.String(100), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=True),
        sa.Column('customer_phone', sa.String(20), nullable=True),
        sa.Column('guests', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time', sa.Time(), nullable=False),
        sa.Column('duration_hours', sa.Integer(), nullable=False, server_default='2'),
        sa.Column('buffer_minutes', sa.Integer(), nullable=False, server_default='15'),
        sa.Column('status', sa.String(20), nullable=False, server_default='confirmed'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint('guests > 0', name='ck_reservations_guests_positive'),
        sa.CheckConstraint('duration_hours > 0', name='ck_reservations_duration_positive'),
        sa.CheckConstraint('buffer_minutes >= 0', name='ck_reservations_buffer_non_negative'),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'arrived', 'in_progress', 'completed', 'cancelled')",
            name='ck_reservations_status',
        ),
    )
    op.create_index('idx_reservations_table_date', 'reservations', ['table_id', 'date'])
    op.create_index('idx_reservations_date', 'reservations', ['date'])
    op.create_index('idx_reservations_status', 'reservations', ['status'])

    # Menu and orders
    op.create_table(
        'menu_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('is_vegetarian', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_spicy', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('prep_time_minutes', sa.Integer(), nullable=False, server_default='15'),
        sa.Column('allergens', sa.JSON(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint('price > 0', name='ck_menu_items_price_positive'),
        sa.CheckConstraint('prep_time_minutes > 0', name='ck_menu_items_prep_time_positive'),
    )

    op.create_table(
        'orders',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('reservation_id', sa.Uuid(), sa.ForeignKey('reservations.id', ondelete='CASCADE'), nullable=True),
        sa.Column('table_id', sa.Uuid(), sa.ForeignKey('tables.id', ondelete='CASCADE'), nullable=True),
        sa.Column('customer_name', sa.String(100), nullable=True),
        sa.Column('customer_phone', sa.String(20), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'preparing', 'ready', 'served', 'cancelled')",
            name='ck_orders_status',
        ),
    )
    op.create_index('idx_orders_status', 'orders', ['status'])
    op.create_index('idx_orders_created_at', 'orders', ['created_at'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('order_id', sa.Uuid(), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('menu_item_id', sa.Uuid(), sa.ForeignKey('menu_items.id', ondelete='SET NULL'), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('item_name', sa.String(100), nullable=False),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('prep_time_minutes', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.CheckConstraint('quantity > 0', name='ck_order_items_quantity_positive'),
    )
    op.create_index('idx_order_items_order_id', 'order_items', ['order_id'])

    op.create_table(
        'restaurant_settings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('setting_key', sa.String(50), nullable=False, unique=True),
        sa.Column('setting_value', sa.Text(), nullable=False),
        sa.Column('setting_type', sa.String(20), nullable=False, server_default='string'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint(
            "setting_type IN ('string', 'number', 'boolean', 'json')",
            name='ck_restaurant_settings_type',
        ),
    )


def downgrade() -> None:
    op.drop_table('restaurant_settings')
    op.drop_index('idx_order_items_order_id', table_name='order_items')
    op.drop_table('order_items')
    op.drop_index('idx_orders_created_at', table_name='orders')
    op.drop_index('idx_orders_status', table_name='orders')
    op.drop_table('orders')
    op.drop_table('menu_items')
    op.drop_index('idx_reservations_status', table_name='reservations')
    op.drop_index('idx_reservations_date', table_name='reservations')
    op.drop_index('idx_reservations_table_date', table_name='reservations')
    op.drop_table('reservations')
    op.drop_table('tables')
    op.drop_index('idx_token_blacklist_expires', table_name='token_blacklist')
    op.drop_table('token_blacklist')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
