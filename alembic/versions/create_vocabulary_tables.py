"""Create topic and vocabulary tables

Revision ID: create_vocabulary_tables
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'create_vocabulary_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create topics, vocabularies, meanings and definitions."""
    op.create_table(
        'topics',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('status', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('deleted_at', sa.TIMESTAMP(), nullable=True),
        sa.Column('created_by', sa.String(36), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(), nullable=True),
    )
    op.create_index('ix_topics_name', 'topics', ['name'])
    op.create_index('ix_topics_slug', 'topics', ['slug'])

    op.create_table(
        'vocabularies',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('word', sa.String(255), nullable=False),
        sa.Column('translation', sa.Text(), nullable=True),
        sa.Column('phonetic', sa.String(255), nullable=True),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('audio_url_us', sa.String(1000), nullable=True),
        sa.Column('audio_url_uk', sa.String(1000), nullable=True),
        sa.Column('audio_url_au', sa.String(1000), nullable=True),
        sa.Column('status', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('topic_id', sa.String(36), sa.ForeignKey('topics.id'), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('deleted_at', sa.TIMESTAMP(), nullable=True),
        sa.Column('created_by', sa.String(36), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(), nullable=True),
    )
    op.create_index('ix_vocabularies_word', 'vocabularies', ['word'])
    op.create_index('idx_vocabularies_topic', 'vocabularies', ['topic_id'])

    # One active row per word, case-insensitive
    op.create_index(
        'uq_vocabularies_word_active',
        'vocabularies',
        [sa.text('lower(word)')],
        unique=True,
        postgresql_where=sa.text('deleted_at IS NULL'),
        sqlite_where=sa.text('deleted_at IS NULL')
    )

    op.create_table(
        'meanings',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'vocabulary_id', sa.String(36),
            sa.ForeignKey('vocabularies.id', ondelete='CASCADE'),
            nullable=False
        ),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('part_of_speech', sa.String(32), nullable=False, server_default='noun'),
        sa.Column('synonyms', sa.JSON(), nullable=False),
        sa.Column('antonyms', sa.JSON(), nullable=False),
    )
    op.create_index('ix_meanings_vocabulary_id', 'meanings', ['vocabulary_id'])

    op.create_table(
        'definitions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'meaning_id', sa.String(36),
            sa.ForeignKey('meanings.id', ondelete='CASCADE'),
            nullable=False
        ),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('definition', sa.Text(), nullable=False),
        sa.Column('translation', sa.Text(), nullable=True),
        sa.Column('example', sa.Text(), nullable=True),
        sa.Column('example_translation', sa.Text(), nullable=True),
    )
    op.create_index('ix_definitions_meaning_id', 'definitions', ['meaning_id'])


def downgrade():
    """Drop the vocabulary tables."""
    op.drop_index('ix_definitions_meaning_id', table_name='definitions')
    op.drop_table('definitions')
    op.drop_index('ix_meanings_vocabulary_id', table_name='meanings')
    op.drop_table('meanings')
    op.drop_index('uq_vocabularies_word_active', table_name='vocabularies')
    op.drop_index('idx_vocabularies_topic', table_name='vocabularies')
    op.drop_index('ix_vocabularies_word', table_name='vocabularies')
    op.drop_table('vocabularies')
    op.drop_index('ix_topics_slug', table_name='topics')
    op.drop_index('ix_topics_name', table_name='topics')
    op.drop_table('topics')
