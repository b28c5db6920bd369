"""create users and media_files tables

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-19 10:12:44.208731

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2a9c1d7e40'
down_revision = None
branch_labels = None
depends_on = None


media_type_enum = sa.Enum('image', 'video', name='mediatype')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('google_id', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_google_id', 'users', ['google_id'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'media_files',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('original_file_name', sa.String(length=255), nullable=False),
        sa.Column('file_path', sa.String(length=500), nullable=False),
        sa.Column('thumbnail_path', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('content_type', sa.String(length=100), nullable=False),
        sa.Column('media_type', media_type_enum, nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=False),
        sa.Column('taken_at', sa.DateTime(), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False),
        sa.Column(
            'uploaded_by',
            sa.Integer(),
            sa.ForeignKey('users.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('width', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('duration_seconds', sa.Float(), nullable=True),
        sa.Column('camera_model', sa.String(length=255), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
    )
    op.create_index('ix_media_files_id', 'media_files', ['id'])
    op.create_index('ix_media_files_file_name', 'media_files', ['file_name'])
    op.create_index('ix_media_files_taken_at', 'media_files', ['taken_at'])
    op.create_index('ix_media_files_uploaded_at', 'media_files', ['uploaded_at'])
    op.create_index('ix_media_files_uploaded_by', 'media_files', ['uploaded_by'])


def downgrade() -> None:
    op.drop_table('media_files')
    op.drop_table('users')
    media_type_enum.drop(op.get_bind(), checkfirst=True)
