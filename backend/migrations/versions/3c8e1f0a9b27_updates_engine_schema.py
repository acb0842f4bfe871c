"""users, observations, comments, identifications and updates

Revision ID: 3c8e1f0a9b27
Revises:
Create Date: 2026-10-19 09:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c8e1f0a9b27'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('login', sa.String(length=40), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index('ix_users_login', ['login'], unique=True)
        batch_op.create_index('ix_users_email', ['email'], unique=True)

    op.create_table(
        'user_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('email_comment_notifications', sa.Boolean(), nullable=False),
        sa.Column('email_identification_notifications', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('user_settings', schema=None) as batch_op:
        batch_op.create_index('ix_user_settings_user_id', ['user_id'], unique=True)

    op.create_table(
        'taxa',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('rank', sa.String(length=32), nullable=True),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['parent_id'], ['taxa.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('taxa', schema=None) as batch_op:
        batch_op.create_index('ix_taxa_name', ['name'], unique=False)
        batch_op.create_index('ix_taxa_parent_id', ['parent_id'], unique=False)

    op.create_table(
        'taxon_names',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('taxon_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('lexicon', sa.String(length=64), nullable=True),
        sa.Column('is_scientific', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['taxon_id'], ['taxa.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('taxon_names', schema=None) as batch_op:
        batch_op.create_index('ix_taxon_names_taxon_id', ['taxon_id'], unique=False)

    op.create_table(
        'observations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('taxon_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('observed_on', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['taxon_id'], ['taxa.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('observations', schema=None) as batch_op:
        batch_op.create_index('ix_observations_user_id', ['user_id'], unique=False)
        batch_op.create_index('ix_observations_taxon_id', ['taxon_id'], unique=False)

    op.create_table(
        'identifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('observation_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('taxon_id', sa.Integer(), nullable=False),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['observation_id'], ['observations.id']),
        sa.ForeignKeyConstraint(['taxon_id'], ['taxa.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('identifications', schema=None) as batch_op:
        batch_op.create_index('ix_identifications_observation_id', ['observation_id'], unique=False)
        batch_op.create_index('ix_identifications_user_id', ['user_id'], unique=False)
        batch_op.create_index('ix_identifications_taxon_id', ['taxon_id'], unique=False)

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('parent_type', sa.String(length=64), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('comments', schema=None) as batch_op:
        batch_op.create_index('ix_comments_user_id', ['user_id'], unique=False)
        batch_op.create_index('ix_comments_parent', ['parent_type', 'parent_id'], unique=False)

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('posts', schema=None) as batch_op:
        batch_op.create_index('ix_posts_user_id', ['user_id'], unique=False)

    op.create_table(
        'lists',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('lists', schema=None) as batch_op:
        batch_op.create_index('ix_lists_user_id', ['user_id'], unique=False)

    op.create_table(
        'listed_taxa',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('list_id', sa.Integer(), nullable=False),
        sa.Column('taxon_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['list_id'], ['lists.id']),
        sa.ForeignKeyConstraint(['taxon_id'], ['taxa.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('list_id', 'taxon_id', name='uq_listed_taxa_list_taxon'),
    )
    with op.batch_alter_table('listed_taxa', schema=None) as batch_op:
        batch_op.create_index('ix_listed_taxa_list_id', ['list_id'], unique=False)
        batch_op.create_index('ix_listed_taxa_taxon_id', ['taxon_id'], unique=False)

    op.create_table(
        'observation_links',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('observation_id', sa.Integer(), nullable=False),
        sa.Column('href', sa.String(length=512), nullable=False),
        sa.Column('href_name', sa.String(length=128), nullable=True),
        sa.Column('rel', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['observation_id'], ['observations.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('observation_links', schema=None) as batch_op:
        batch_op.create_index('ix_observation_links_observation_id', ['observation_id'], unique=False)
        batch_op.create_index('ix_observation_links_href_name', ['href_name'], unique=False)
        batch_op.create_index('ix_observation_links_observation_href', ['observation_id', 'href'], unique=False)

    op.create_table(
        'updates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('subscriber_id', sa.Integer(), nullable=True),
        sa.Column('resource_type', sa.String(length=64), nullable=True),
        sa.Column('resource_id', sa.Integer(), nullable=True),
        sa.Column('notifier_type', sa.String(length=64), nullable=True),
        sa.Column('notifier_id', sa.Integer(), nullable=True),
        sa.Column('resource_owner_id', sa.Integer(), nullable=True),
        sa.Column('notification', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('viewed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['resource_owner_id'], ['users.id']),
        sa.ForeignKeyConstraint(['subscriber_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'notifier_type', 'notifier_id', 'subscriber_id', 'notification',
            name='uq_updates_notifier_subscriber_notification',
        ),
    )
    with op.batch_alter_table('updates', schema=None) as batch_op:
        batch_op.create_index('ix_updates_subscriber_id', ['subscriber_id'], unique=False)
        batch_op.create_index('ix_updates_resource_owner_id', ['resource_owner_id'], unique=False)
        batch_op.create_index('ix_updates_subscriber_created', ['subscriber_id', 'created_at'], unique=False)
        batch_op.create_index('ix_updates_resource', ['resource_type', 'resource_id'], unique=False)


def downgrade():
    op.drop_table('updates')
    op.drop_table('observation_links')
    op.drop_table('listed_taxa')
    op.drop_table('lists')
    op.drop_table('posts')
    op.drop_table('comments')
    op.drop_table('identifications')
    op.drop_table('observations')
    op.drop_table('taxon_names')
    op.drop_table('taxa')
    op.drop_table('user_settings')
    op.drop_table('users')
