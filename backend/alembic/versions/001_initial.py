"""Initial migration - create all tables

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Clients (tenants)
    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('base_path', sa.String(100), nullable=False),
        sa.Column('logo_url', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_clients_base_path', 'clients', ['base_path'], unique=True)

    # Athletes
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('athlete_id', sa.String(32), nullable=False),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone_number', sa.String(50), nullable=False),
        sa.Column('date_of_birth', sa.String(20), nullable=False),
        sa.Column('gender', sa.String(20), nullable=False),
        sa.Column('group_name', sa.String(255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('country', sa.String(100), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('zipcode', sa.String(20), nullable=False),
        sa.Column('shoes_brand_model', sa.String(255), nullable=True),
        sa.Column('gps_watch_model', sa.String(255), nullable=True),
        sa.Column('hydration_supplement', sa.String(255), nullable=True),
        sa.Column('emergency_contact_name', sa.String(255), nullable=True),
        sa.Column('emergency_contact_number', sa.String(50), nullable=True),
        sa.Column('fitness_level', sa.String(50), nullable=False, server_default='beginner'),
        sa.Column('fitness_goals', sa.Text(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('account_status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('strava_token', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_athlete_id', 'users', ['athlete_id'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_client_id', 'users', ['client_id'])
    op.create_index('ix_users_gender', 'users', ['gender'])

    # Activities
    op.create_table(
        'activities',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('distance', sa.Float(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('proof_link', sa.String(500), nullable=True),
        sa.Column('proof_image', sa.Text(), nullable=True),
        sa.Column('external_id', sa.String(64), nullable=True),
        sa.Column('external_source', sa.String(32), nullable=True),
        sa.Column('elevation_gain', sa.Float(), nullable=True),
        sa.Column('avg_heart_rate', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_id', 'external_id', name='uq_activities_user_external'),
    )
    op.create_index('ix_activities_user_id', 'activities', ['user_id'])
    op.create_index('ix_activities_type', 'activities', ['type'])
    op.create_index('ix_activities_date', 'activities', ['date'])

    # Certificates
    op.create_table(
        'certificates',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('link', sa.String(500), nullable=False),
        sa.Column('issued_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_certificates_user_id', 'certificates', ['user_id'])

    # Strava push subscription (at most one row)
    op.create_table(
        'strava_webhook_subscriptions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('subscription_id', sa.String(32), nullable=False, unique=True),
        sa.Column('callback_url', sa.String(500), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('strava_webhook_subscriptions')
    op.drop_index('ix_certificates_user_id', 'certificates')
    op.drop_table('certificates')
    op.drop_index('ix_activities_date', 'activities')
    op.drop_index('ix_activities_type', 'activities')
    op.drop_index('ix_activities_user_id', 'activities')
    op.drop_table('activities')
    op.drop_index('ix_users_gender', 'users')
    op.drop_index('ix_users_client_id', 'users')
    op.drop_index('ix_users_email', 'users')
    op.drop_index('ix_users_athlete_id', 'users')
    op.drop_table('users')
    op.drop_index('ix_clients_base_path', 'clients')
    op.drop_table('clients')
