"""initial schema: tenants, pages, page layouts, site settings, audit logs

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-01-12 09:30:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade():
    op.create_table(
        'tenants',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('enable_cms', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('enable_multilingual', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('features', JSON, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_tenants_slug', 'tenants', ['slug'], unique=True)

    op.create_table(
        'pages',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('tenant_id', sa.String(length=64), sa.ForeignKey('tenants.id'), nullable=True),
        sa.Column('page_name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('page_type', sa.String(length=50), nullable=False, server_default='page'),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='draft'),
        sa.Column('theme_id', sa.String(length=100), nullable=True),
        sa.Column('meta_title', sa.String(length=255), nullable=True),
        sa.Column('meta_description', sa.Text(), nullable=True),
        sa.Column('seo_index', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('campaign_source', sa.String(length=100), nullable=True),
        sa.Column('conversion_goal', sa.String(length=255), nullable=True),
        sa.Column('legal_type', sa.String(length=100), nullable=True),
        sa.Column('last_reviewed_date', sa.Date(), nullable=True),
        sa.Column('legal_version', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('tenant_id', 'slug', name='uq_page_slug_per_tenant'),
    )
    op.create_index('ix_pages_tenant_id', 'pages', ['tenant_id'])
    op.create_index('ix_pages_slug', 'pages', ['slug'])
    op.create_index('ix_pages_page_type', 'pages', ['page_type'])
    op.create_index('ix_pages_status', 'pages', ['status'])
    op.create_index('ix_pages_theme_id', 'pages', ['theme_id'])
    op.create_index('ix_pages_created_at', 'pages', ['created_at'])

    op.create_table(
        'page_layouts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'page_id',
            sa.Integer(),
            sa.ForeignKey('pages.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('language', sa.String(length=50), nullable=False, server_default='default'),
        sa.Column('layout_json', JSON, nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('page_id', 'language', name='page_layouts_page_id_language_unique'),
    )
    op.create_index('ix_page_layouts_page_id', 'page_layouts', ['page_id'])
    op.create_index('ix_page_layouts_created_at', 'page_layouts', ['created_at'])

    op.create_table(
        'site_settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('tenant_id', sa.String(length=64), sa.ForeignKey('tenants.id'), nullable=True),
        sa.Column('setting_key', sa.String(length=100), nullable=False),
        sa.Column('setting_value', sa.Text(), nullable=True),
        sa.Column('setting_type', sa.String(length=50), nullable=False, server_default='text'),
        sa.Column('setting_category', sa.String(length=50), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('setting_key', 'tenant_id', name='uq_site_setting_key_per_tenant'),
    )
    op.create_index('ix_site_settings_tenant_id', 'site_settings', ['tenant_id'])
    op.create_index('ix_site_settings_setting_key', 'site_settings', ['setting_key'])
    op.create_index('ix_site_settings_created_at', 'site_settings', ['created_at'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('tenant_id', sa.String(length=64), sa.ForeignKey('tenants.id'), nullable=True),
        sa.Column('actor_id', sa.String(length=64), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=False),
        sa.Column('entity_id', sa.String(length=64), nullable=False),
        sa.Column('payload', JSON, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_audit_logs_tenant_id', 'audit_logs', ['tenant_id'])
    op.create_index('ix_audit_logs_actor_id', 'audit_logs', ['actor_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])
    op.create_index('ix_audit_entity', 'audit_logs', ['entity_type', 'entity_id'])
    op.create_index('ix_audit_tenant_action', 'audit_logs', ['tenant_id', 'action'])


def downgrade():
    op.drop_table('audit_logs')
    op.drop_table('site_settings')
    op.drop_table('page_layouts')
    op.drop_table('pages')
    op.drop_table('tenants')
