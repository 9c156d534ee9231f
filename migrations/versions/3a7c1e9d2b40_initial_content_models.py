"""initial content models

Revision ID: 3a7c1e9d2b40
Revises: 
Create Date: 2026-10-19 09:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a7c1e9d2b40'
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column('id', sa.String(length=36), primary_key=True)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def _block_fk():
    return sa.Column(
        'block_id', sa.String(length=36),
        sa.ForeignKey('blocks.id', ondelete='CASCADE'), nullable=False, index=True,
    )


# Ordered text children of a block share one shape
CONTENT_CHILD_TABLES = ('pros', 'cons', 'ingredients', 'highlights', 'bullet_points')


def upgrade():
    conn = op.get_bind()
    insp = sa.inspect(conn)

    if not insp.has_table('users'):
        op.create_table(
            'users',
            _id(),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('email', sa.String(length=120), nullable=False),
            sa.Column('role', sa.String(length=20), nullable=False, server_default='EDITOR'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    if not insp.has_table('categories'):
        op.create_table(
            'categories',
            _id(),
            sa.Column('name', sa.String(length=150), nullable=False),
            sa.Column('slug', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('parent_id', sa.String(length=36), sa.ForeignKey('categories.id'), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
            *_timestamps(),
        )
        op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    if not insp.has_table('articles'):
        op.create_table(
            'articles',
            _id(),
            sa.Column('title', sa.String(length=255), nullable=False),
            sa.Column('slug', sa.String(length=300), nullable=False),
            sa.Column('excerpt', sa.Text(), nullable=True),
            sa.Column('image_url', sa.String(length=500), nullable=True),
            sa.Column('publish_date', sa.DateTime(), nullable=False, server_default=sa.func.now()),
            *_timestamps(),
            sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('category_id', sa.String(length=36), sa.ForeignKey('categories.id'), nullable=True),
            sa.Column('meta_description', sa.Text(), nullable=True),
            sa.Column('focus_keyword', sa.String(length=255), nullable=True),
            sa.Column('seo_title', sa.String(length=255), nullable=True),
            sa.Column('seo_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('word_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('reading_time', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        )
        op.create_index('ix_articles_slug', 'articles', ['slug'], unique=True)
        op.create_index('ix_articles_user_id', 'articles', ['user_id'])
        op.create_index('ix_articles_category_id', 'articles', ['category_id'])

    if not insp.has_table('keyword_variations'):
        op.create_table(
            'keyword_variations',
            _id(),
            sa.Column('article_id', sa.String(length=36),
                      sa.ForeignKey('articles.id', ondelete='CASCADE'), nullable=False, index=True),
            sa.Column('keyword', sa.String(length=255), nullable=False),
            sa.Column('search_volume', sa.Integer(), nullable=True),
            sa.Column('difficulty', sa.String(length=20), nullable=True),
            sa.Column('intent', sa.String(length=30), nullable=True),
            sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        )

    if not insp.has_table('seo_data'):
        op.create_table(
            'seo_data',
            _id(),
            sa.Column('article_id', sa.String(length=36),
                      sa.ForeignKey('articles.id', ondelete='CASCADE'), nullable=False, unique=True),
            sa.Column('title_suggestions', sa.JSON(), nullable=False),
            sa.Column('content_suggestions', sa.JSON(), nullable=False),
            sa.Column('readability_score', sa.Float(), nullable=False, server_default='0'),
            sa.Column('keyword_density', sa.Float(), nullable=False, server_default='0'),
            sa.Column('word_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('reading_time', sa.Integer(), nullable=False, server_default='0'),
            *_timestamps(),
        )

    if not insp.has_table('sections'):
        op.create_table(
            'sections',
            _id(),
            sa.Column('title', sa.String(length=255), nullable=False, server_default=''),
            sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
            *_timestamps(),
            sa.Column('article_id', sa.String(length=36),
                      sa.ForeignKey('articles.id', ondelete='CASCADE'), nullable=False, index=True),
        )

    if not insp.has_table('blocks'):
        op.create_table(
            'blocks',
            _id(),
            sa.Column('type', sa.String(length=30), nullable=False, server_default='paragraph'),
            sa.Column('content', sa.Text(), nullable=True),
            sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('section_id', sa.String(length=36),
                      sa.ForeignKey('sections.id', ondelete='CASCADE'), nullable=False, index=True),
            sa.Column('level', sa.Integer(), nullable=True),
            sa.Column('list_type', sa.String(length=20), nullable=True),
            sa.Column('image_url', sa.String(length=500), nullable=True),
            sa.Column('image_caption', sa.Text(), nullable=True),
            sa.Column('image_alt', sa.String(length=500), nullable=True),
            sa.Column('language', sa.String(length=50), nullable=True),
            sa.Column('author', sa.String(length=255), nullable=True),
            sa.Column('product_name', sa.String(length=255), nullable=True),
            sa.Column('overall_rating', sa.Float(), nullable=True),
            sa.Column('ingredients_introduction', sa.Text(), nullable=True),
            sa.Column('cta_text', sa.Text(), nullable=True),
            sa.Column('cta_button_text', sa.String(length=255), nullable=True),
            sa.Column('cta_button_link', sa.String(length=500), nullable=True),
            sa.Column('background_color', sa.String(length=50), nullable=True),
        )

    for table in CONTENT_CHILD_TABLES:
        if not insp.has_table(table):
            op.create_table(
                table,
                _id(),
                sa.Column('content', sa.Text(), nullable=False, server_default=''),
                sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
                _block_fk(),
            )

    if not insp.has_table('faq_items'):
        op.create_table(
            'faq_items',
            _id(),
            sa.Column('question', sa.Text(), nullable=False, server_default=''),
            sa.Column('answer', sa.Text(), nullable=False, server_default=''),
            sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
            _block_fk(),
        )

    if not insp.has_table('specifications'):
        op.create_table(
            'specifications',
            _id(),
            sa.Column('name', sa.String(length=255), nullable=False, server_default=''),
            sa.Column('value', sa.Text(), nullable=False, server_default=''),
            sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
            _block_fk(),
        )

    if not insp.has_table('ingredient_items'):
        op.create_table(
            'ingredient_items',
            _id(),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('image_url', sa.String(length=500), nullable=False, server_default=''),
            sa.Column('description', sa.Text(), nullable=False, server_default=''),
            sa.Column('study_year', sa.String(length=10), nullable=True),
            sa.Column('study_source', sa.String(length=500), nullable=True),
            sa.Column('study_description', sa.Text(), nullable=True),
            sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
            _block_fk(),
        )

    if not insp.has_table('custom_fields'):
        op.create_table(
            'custom_fields',
            _id(),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('value', sa.Text(), nullable=False, server_default=''),
            _block_fk(),
        )

    if not insp.has_table('ratings'):
        op.create_table(
            'ratings',
            _id(),
            sa.Column('block_id', sa.String(length=36),
                      sa.ForeignKey('blocks.id', ondelete='CASCADE'), nullable=False, unique=True),
            sa.Column('ingredients', sa.Float(), nullable=True),
            sa.Column('value', sa.Float(), nullable=True),
            sa.Column('manufacturer', sa.Float(), nullable=True),
            sa.Column('safety', sa.Float(), nullable=True),
            sa.Column('effectiveness', sa.Float(), nullable=True),
        )


def downgrade():
    for table in (
        'ratings', 'custom_fields', 'ingredient_items', 'specifications', 'faq_items',
        *reversed(CONTENT_CHILD_TABLES),
        'blocks', 'sections', 'seo_data', 'keyword_variations', 'articles', 'categories', 'users',
    ):
        op.drop_table(table)
