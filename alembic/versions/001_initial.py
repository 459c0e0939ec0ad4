"""Create users, follow graph and salon catalog tables

Revision ID: 001
Revises: 
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('phone_number', sa.String(16), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('username', sa.String(30), nullable=True),
        sa.Column('name', sa.String(50), nullable=True),
        sa.Column('user_image', sa.String(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('address_line1', sa.String(), nullable=True),
        sa.Column('address_line2', sa.String(), nullable=True),
        sa.Column('address_type', sa.String(10), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('phone_number'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    op.create_index(op.f('ix_users_created_at'), 'users', ['created_at'], unique=False)

    # Follow edges: one row per (follower, following) pair
    op.create_table(
        'user_follows',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('follower_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('following_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('follower_id', 'following_id', name='uq_user_follows_pair'),
        sa.CheckConstraint('follower_id <> following_id', name='ck_user_follows_no_self'),
    )
    op.create_index(op.f('ix_user_follows_follower_id'), 'user_follows', ['follower_id'])
    op.create_index(op.f('ix_user_follows_following_id'), 'user_follows', ['following_id'])
    op.create_index('ix_user_follows_following_follower', 'user_follows', ['following_id', 'follower_id'])

    # Salons
    op.create_table(
        'salons',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('location_name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('contact_phone', sa.String(), nullable=True),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('contact_website', sa.String(), nullable=True),
        sa.Column('operating_hours', sa.JSON(), nullable=False),
        sa.Column('amenities', sa.JSON(), nullable=False),
        sa.Column('average_price', sa.String(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('number_of_reviews', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_salons_is_active'), 'salons', ['is_active'])
    op.create_index(op.f('ix_salons_created_at'), 'salons', ['created_at'])
    op.create_index('ix_salons_active_lat_lng', 'salons', ['is_active', 'latitude', 'longitude'])

    op.create_table(
        'service_categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('salon_id', sa.String(36), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('icon', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_service_categories_id'), 'service_categories', ['id'])
    op.create_index(op.f('ix_service_categories_salon_id'), 'service_categories', ['salon_id'])

    op.create_table(
        'salon_services',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('service_categories.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('service_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('price', sa.String(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_salon_services_id'), 'salon_services', ['id'])
    op.create_index(op.f('ix_salon_services_category_id'), 'salon_services', ['category_id'])

    op.create_table(
        'stylists',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('salon_id', sa.String(36), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('profile_photo', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('specialization', sa.JSON(), nullable=False),
        sa.Column('experience', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_stylists_id'), 'stylists', ['id'])
    op.create_index(op.f('ix_stylists_salon_id'), 'stylists', ['salon_id'])

    op.create_table(
        'salon_reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('salon_id', sa.String(36), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('review_message', sa.Text(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_salon_reviews_id'), 'salon_reviews', ['id'])
    op.create_index(op.f('ix_salon_reviews_salon_id'), 'salon_reviews', ['salon_id'])


def downgrade():
    op.drop_table('salon_reviews')
    op.drop_table('stylists')
    op.drop_table('salon_services')
    op.drop_table('service_categories')
    op.drop_table('salons')
    op.drop_table('user_follows')
    op.drop_table('users')
