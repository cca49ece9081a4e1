"""initial timetable tables

Revision ID: 0001
Revises: 
Create Date: 2025-09-05

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('schedule',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('term_name', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_schedule_is_active', 'schedule', ['is_active'])

    op.create_table('course',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('schedule_id', sa.Integer(), sa.ForeignKey('schedule.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('teacher', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('location', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('time_slot', sa.Integer(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('weeks', sa.JSON(), nullable=False),
        sa.Column('color', sa.String(length=9), nullable=False, server_default='#007AFF'),
    )
    op.create_index('ix_course_schedule_id', 'course', ['schedule_id'])
    op.create_index('ix_course_schedule_day', 'course', ['schedule_id', 'day_of_week'])

    op.create_table('time_slot',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_no', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.UniqueConstraint('order_no', name='uq_timeslot_order_no'),
    )

    op.create_table('schedule_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('week_start_day', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('semester_start_date', sa.Date(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )


def downgrade():
    op.drop_table('schedule_settings')
    op.drop_table('time_slot')
    op.drop_index('ix_course_schedule_day', table_name='course')
    op.drop_index('ix_course_schedule_id', table_name='course')
    op.drop_table('course')
    op.drop_index('ix_schedule_is_active', table_name='schedule')
    op.drop_table('schedule')
