"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 10:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum('user', 'store_owner', 'admin', name='user_role')
transmission = sa.Enum('MANUAL', 'AUTOMATIC', 'CVT', name='transmission')
fuel = sa.Enum('FLEX', 'GASOLINE', 'DIESEL', 'ELECTRIC', 'HYBRID', name='fuel')
car_status = sa.Enum('DRAFT', 'ACTIVE', 'SOLD', 'BANNED', name='car_status')
transaction_status = sa.Enum('PENDING', 'ACCEPTED', 'REJECTED', 'COMPLETED', 'CANCELLED', name='transaction_status')
bulk_import_status = sa.Enum('PENDING', 'PROCESSING', 'COMPLETED', 'FAILED', name='bulk_import_status')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('auth_user_id', sa.String(64), nullable=False),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_signed_in', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_auth_user_id', 'users', ['auth_user_id'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('full_name', sa.Text(), nullable=False),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('location', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'stores',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('document', sa.String(20), nullable=False),
        sa.Column('api_key', sa.String(64), nullable=False, unique=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('location', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_stores_id', 'stores', ['id'])
    op.create_index('ix_stores_owner_id', 'stores', ['owner_id'])
    op.create_index('ix_stores_slug', 'stores', ['slug'], unique=True)

    op.create_table(
        'cars',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('seller_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('store_id', sa.Integer(), sa.ForeignKey('stores.id'), nullable=True),
        sa.Column('brand', sa.String(100), nullable=False),
        sa.Column('model', sa.String(100), nullable=False),
        sa.Column('version', sa.String(100), nullable=False),
        sa.Column('year_fab', sa.Integer(), nullable=False),
        sa.Column('year_model', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('mileage', sa.Integer(), nullable=False),
        sa.Column('transmission', transmission, nullable=False),
        sa.Column('fuel', fuel, nullable=False),
        sa.Column('color', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('features', sa.JSON(), nullable=True),
        sa.Column('status', car_status, nullable=False),
        sa.Column('active_slot', sa.Integer(), nullable=True, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_cars_id', 'cars', ['id'])
    op.create_index('ix_cars_seller_id', 'cars', ['seller_id'])
    op.create_index('ix_cars_store_id', 'cars', ['store_id'])
    op.create_index('ix_cars_year_model', 'cars', ['year_model'])
    op.create_index('ix_cars_price', 'cars', ['price'])
    op.create_index('ix_cars_status', 'cars', ['status'])
    op.create_index('brand_model_idx', 'cars', ['brand', 'model'])

    op.create_table(
        'car_photos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('car_id', sa.Integer(), sa.ForeignKey('cars.id', ondelete='CASCADE'), nullable=False),
        sa.Column('urls', sa.JSON(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_car_photos_id', 'car_photos', ['id'])
    op.create_index('ix_car_photos_car_id', 'car_photos', ['car_id'])
    op.create_index('car_photo_order_idx', 'car_photos', ['car_id', 'order_index'])

    op.create_table(
        'car_views',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('car_id', sa.Integer(), sa.ForeignKey('cars.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('viewed_at', sa.Date(), nullable=False),
    )
    op.create_index('ix_car_views_id', 'car_views', ['id'])
    op.create_index('ix_car_views_car_id', 'car_views', ['car_id'])
    op.create_index('ix_car_views_viewed_at', 'car_views', ['viewed_at'])

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('car_id', sa.Integer(), sa.ForeignKey('cars.id', ondelete='SET NULL'), nullable=True),
        sa.Column('sender_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('receiver_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_messages_id', 'messages', ['id'])
    op.create_index('ix_messages_car_id', 'messages', ['car_id'])
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'])
    op.create_index('ix_messages_receiver_id', 'messages', ['receiver_id'])
    op.create_index('conversation_idx', 'messages', ['car_id', 'sender_id', 'receiver_id'])

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('seller_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('reviewer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('car_id', sa.Integer(), sa.ForeignKey('cars.id', ondelete='SET NULL'), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('seller_id', 'reviewer_id', 'car_id', name='unique_review'),
    )
    op.create_index('ix_reviews_id', 'reviews', ['id'])
    op.create_index('ix_reviews_seller_id', 'reviews', ['seller_id'])
    op.create_index('ix_reviews_reviewer_id', 'reviews', ['reviewer_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('car_id', sa.Integer(), sa.ForeignKey('cars.id', ondelete='SET NULL'), nullable=True),
        sa.Column('buyer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('seller_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('proposed_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', transaction_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_transactions_id', 'transactions', ['id'])
    op.create_index('ix_transactions_car_id', 'transactions', ['car_id'])
    op.create_index('ix_transactions_buyer_id', 'transactions', ['buyer_id'])
    op.create_index('ix_transactions_seller_id', 'transactions', ['seller_id'])
    op.create_index('ix_transactions_status', 'transactions', ['status'])

    op.create_table(
        'moderation_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('admin_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('target_type', sa.String(20), nullable=False),
        sa.Column('target_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_moderation_logs_id', 'moderation_logs', ['id'])
    op.create_index('ix_moderation_logs_admin_id', 'moderation_logs', ['admin_id'])

    op.create_table(
        'bulk_import_jobs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('store_id', sa.Integer(), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('status', bulk_import_status, nullable=False),
        sa.Column('total_records', sa.Integer(), nullable=False),
        sa.Column('processed_records', sa.Integer(), nullable=False),
        sa.Column('failed_records', sa.Integer(), nullable=False),
        sa.Column('error_log', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_bulk_import_jobs_id', 'bulk_import_jobs', ['id'])
    op.create_index('ix_bulk_import_jobs_store_id', 'bulk_import_jobs', ['store_id'])
    op.create_index('ix_bulk_import_jobs_status', 'bulk_import_jobs', ['status'])


def downgrade() -> None:
    op.drop_table('bulk_import_jobs')
    op.drop_table('moderation_logs')
    op.drop_table('transactions')
    op.drop_table('reviews')
    op.drop_table('messages')
    op.drop_table('car_views')
    op.drop_table('car_photos')
    op.drop_table('cars')
    op.drop_table('stores')
    op.drop_table('profiles')
    op.drop_table('users')
