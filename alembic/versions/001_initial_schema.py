"""initial_schema

Revision ID: 001
Revises:
Create Date: 2025-01-06 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

board_type_enum = sa.Enum('NOTICE', 'BUDGET', 'RESOURCE', 'GALLERY', name='board_type')
budget_type_enum = sa.Enum('BUDGET', 'SETTLEMENT', name='budget_type')


def upgrade() -> None:
    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_admins_id', 'admins', ['id'])
    op.create_index('ix_admins_username', 'admins', ['username'], unique=True)

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('board_type', board_type_enum, nullable=False, comment='게시판 종류'),
        sa.Column('title', sa.String(length=100), nullable=False, comment='제목'),
        sa.Column('content', sa.Text(), nullable=True, comment='내용 (HTML)'),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.true(), comment='공개 여부'),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0', comment='조회수'),
        sa.Column('is_pinned', sa.Boolean(), nullable=True, comment='상단 고정 여부'),
        sa.Column('year', sa.Integer(), nullable=True, comment='회계연도'),
        sa.Column('budget_type', budget_type_enum, nullable=True, comment='예산/결산 구분'),
        sa.Column('thumbnail_url', sa.String(length=1000), nullable=True, comment='대표 이미지 URL'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, comment='생성일시'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, comment='수정일시'),
    )
    op.create_index('ix_posts_id', 'posts', ['id'])
    op.create_index('ix_posts_board_type_created_at', 'posts', ['board_type', 'created_at'])

    op.create_table(
        'attachments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('post_id', sa.Integer(), sa.ForeignKey('posts.id', ondelete='CASCADE'), nullable=False, comment='게시글 ID'),
        sa.Column('filename_original', sa.String(length=255), nullable=False, comment='파일 원본 이름'),
        sa.Column('file_url', sa.String(length=1000), nullable=False, comment='파일 URL'),
        sa.Column('file_size', sa.Integer(), nullable=False, server_default='0', comment='파일 크기(bytes)'),
        sa.Column('mime_type', sa.String(length=100), nullable=True, comment='MIME 타입'),
        sa.Column('is_image', sa.Boolean(), nullable=False, server_default=sa.false(), comment='이미지 여부'),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0', comment='표시 순서'),
    )
    op.create_index('ix_attachments_id', 'attachments', ['id'])
    op.create_index('ix_attachments_post_id', 'attachments', ['post_id'])


def downgrade() -> None:
    op.drop_table('attachments')
    op.drop_table('posts')
    op.drop_table('admins')
    budget_type_enum.drop(op.get_bind(), checkfirst=True)
    board_type_enum.drop(op.get_bind(), checkfirst=True)
