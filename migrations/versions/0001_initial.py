"""tutors, classes and weekly class schedule

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('tutors',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('avatar', sa.String(length=512), nullable=False),
        sa.Column('whatsapp', sa.String(length=64), nullable=False),
        sa.Column('bio', sa.Text(), nullable=False),
    )

    op.create_table('classes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('subject', sa.String(length=255), nullable=False),
        sa.Column('cost', sa.Float(), nullable=False),
        sa.Column('tutor_id', sa.Integer(), sa.ForeignKey('tutors.id', ondelete='CASCADE'), nullable=False),
    )
    op.create_index('ix_classes_subject', 'classes', ['subject'])
    op.create_index('ix_classes_tutor_id', 'classes', ['tutor_id'])

    op.create_table('class_schedule',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('week_day', sa.Integer(), nullable=False),
        sa.Column('from', sa.Integer(), nullable=False),
        sa.Column('to', sa.Integer(), nullable=False),
        sa.CheckConstraint('"from" >= 0 AND "from" < "to" AND "to" <= 1439', name='ck_class_schedule_range'),
    )
    op.create_index('ix_class_schedule_class_weekday', 'class_schedule', ['class_id', 'week_day'])

def downgrade():
    op.drop_index('ix_class_schedule_class_weekday', table_name='class_schedule')
    op.drop_table('class_schedule')
    op.drop_index('ix_classes_tutor_id', table_name='classes')
    op.drop_index('ix_classes_subject', table_name='classes')
    op.drop_table('classes')
    op.drop_table('tutors')
