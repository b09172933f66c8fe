"""baseline scheduling schema

Revision ID: 3b7c2e91a4d0
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b7c2e91a4d0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NON_TERMINAL = sa.text("status NOT IN ('CANCELLED', 'NO_SHOW')")


def upgrade() -> None:
    op.create_table(
        'partners',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('schedule_version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_partners_id', 'partners', ['id'])

    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_rooms_id', 'rooms', ['id'])

    op.create_table(
        'partner_availability',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('partner_id', sa.Integer(), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('break_start', sa.Time(), nullable=True),
        sa.Column('break_end', sa.Time(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['partner_id'], ['partners.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_partner_availability_id', 'partner_availability', ['id'])
    op.create_index('idx_partner_availability_partner_day', 'partner_availability', ['partner_id', 'day_of_week'])

    op.create_table(
        'partner_blocked_dates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('partner_id', sa.Integer(), nullable=False),
        sa.Column('blocked_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('reason', sa.String(length=255), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint(
            'start_time IS NULL OR end_time IS NULL OR start_time != end_time',
            name='check_blocked_date_valid_time_range',
        ),
        sa.ForeignKeyConstraint(['partner_id'], ['partners.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_partner_blocked_dates_id', 'partner_blocked_dates', ['id'])
    op.create_index('idx_partner_blocked_dates_partner_date', 'partner_blocked_dates', ['partner_id', 'blocked_date'])

    op.create_table(
        'appointments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('partner_id', sa.Integer(), nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=True),
        sa.Column('room_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('scheduling_status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('cancellation_reason', sa.String(length=255), nullable=True),
        sa.Column('canceled_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['partner_id'], ['partners.id']),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_appointments_id', 'appointments', ['id'])
    op.create_index('idx_appointments_partner_date', 'appointments', ['partner_id', 'date'])
    op.create_index('idx_appointments_room_date', 'appointments', ['room_id', 'date'])
    op.create_index('idx_appointments_status', 'appointments', ['status'])
    op.create_index(
        'uq_appointments_partner_slot_active',
        'appointments',
        ['partner_id', 'date', 'start_time'],
        unique=True,
        sqlite_where=NON_TERMINAL,
        postgresql_where=NON_TERMINAL,
    )


def downgrade() -> None:
    op.drop_index('uq_appointments_partner_slot_active', table_name='appointments')
    op.drop_index('idx_appointments_status', table_name='appointments')
    op.drop_index('idx_appointments_room_date', table_name='appointments')
    op.drop_index('idx_appointments_partner_date', table_name='appointments')
    op.drop_index('ix_appointments_id', table_name='appointments')
    op.drop_table('appointments')

    op.drop_index('idx_partner_blocked_dates_partner_date', table_name='partner_blocked_dates')
    op.drop_index('ix_partner_blocked_dates_id', table_name='partner_blocked_dates')
    op.drop_table('partner_blocked_dates')

    op.drop_index('idx_partner_availability_partner_day', table_name='partner_availability')
    op.drop_index('ix_partner_availability_id', table_name='partner_availability')
    op.drop_table('partner_availability')

    op.drop_index('ix_rooms_id', table_name='rooms')
    op.drop_table('rooms')

    op.drop_index('ix_partners_id', table_name='partners')
    op.drop_table('partners')
