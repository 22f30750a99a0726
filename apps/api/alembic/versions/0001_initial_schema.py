"""initial field operations schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)

appointment_status = sa.Enum(
    'draft', 'scheduled', 'in_progress', 'completed', 'cancelled', name='appointment_status'
)
dependency_type = sa.Enum(
    'finish_to_start', 'start_to_start', 'finish_to_finish', 'start_to_finish', name='dependency_type'
)
time_log_status = sa.Enum('in_progress', 'completed', 'approved', name='time_log_status')


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'companies',
        sa.Column('company_id', UUID, primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('timezone', sa.String(), nullable=False, server_default='Australia/Sydney'),
        _created_at(),
    )

    op.create_table(
        'workers',
        sa.Column('worker_id', UUID, primary_key=True),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.company_id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('employment_type', sa.String(), nullable=True),
        sa.Column('standard_work_hours', sa.Numeric(5, 2), nullable=True),
        sa.Column('hourly_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_index('ix_workers_company_id', 'workers', ['company_id'])

    op.create_table(
        'worker_schedule',
        sa.Column('schedule_id', UUID, primary_key=True),
        sa.Column('worker_id', UUID, sa.ForeignKey('workers.worker_id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.SmallInteger(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='ck_worker_schedule_dow'),
    )
    op.create_index('ix_worker_schedule_worker_id', 'worker_schedule', ['worker_id'])

    op.create_table(
        'worker_unavailability',
        sa.Column('unavailability_id', UUID, primary_key=True),
        sa.Column('worker_id', UUID, sa.ForeignKey('workers.worker_id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('reason', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index('ix_worker_unavailability_worker_id', 'worker_unavailability', ['worker_id'])

    op.create_table(
        'worker_seasonal_availability',
        sa.Column('seasonal_availability_id', UUID, primary_key=True),
        sa.Column('worker_id', UUID, sa.ForeignKey('workers.worker_id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        _created_at(),
    )
    op.create_index('ix_worker_seasonal_availability_worker_id', 'worker_seasonal_availability', ['worker_id'])

    op.create_table(
        'worker_seasonal_availability_dates',
        sa.Column('seasonal_date_id', UUID, primary_key=True),
        sa.Column(
            'seasonal_availability_id',
            UUID,
            sa.ForeignKey('worker_seasonal_availability.seasonal_availability_id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('periods', sa.JSON(), nullable=False),
        sa.UniqueConstraint('seasonal_availability_id', 'date', name='uq_seasonal_dates_window_date'),
    )
    op.create_index(
        'ix_worker_seasonal_availability_dates_seasonal_availability_id',
        'worker_seasonal_availability_dates',
        ['seasonal_availability_id'],
    )

    op.create_table(
        'appointments',
        sa.Column('appointment_id', UUID, primary_key=True),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.company_id', ondelete='CASCADE'), nullable=False),
        sa.Column('worker_id', UUID, sa.ForeignKey('workers.worker_id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', appointment_status, nullable=False, server_default='scheduled'),
        sa.Column('location_lat', sa.Float(), nullable=True),
        sa.Column('location_lng', sa.Float(), nullable=True),
        sa.Column('gps_check_in_radius', sa.Integer(), nullable=False, server_default='100'),
        _created_at(),
    )
    op.create_index('ix_appointments_company_id', 'appointments', ['company_id'])
    op.create_index('ix_appointments_worker_id', 'appointments', ['worker_id'])

    op.create_table(
        'projects',
        sa.Column('project_id', UUID, primary_key=True),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.company_id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        _created_at(),
    )
    op.create_index('ix_projects_company_id', 'projects', ['company_id'])

    op.create_table(
        'project_tasks',
        sa.Column('task_id', UUID, primary_key=True),
        sa.Column('project_id', UUID, sa.ForeignKey('projects.project_id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='not_started'),
        sa.Column('progress_percentage', sa.Integer(), nullable=False, server_default='0'),
        _created_at(),
    )
    op.create_index('ix_project_tasks_project_id', 'project_tasks', ['project_id'])

    op.create_table(
        'project_task_dependencies',
        sa.Column('dependency_id', UUID, primary_key=True),
        sa.Column('task_id', UUID, sa.ForeignKey('project_tasks.task_id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'depends_on_task_id', UUID, sa.ForeignKey('project_tasks.task_id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('dependency_type', dependency_type, nullable=False, server_default='finish_to_start'),
        sa.Column('lag_days', sa.Integer(), nullable=False, server_default='0'),
        sa.UniqueConstraint('task_id', 'depends_on_task_id', name='uq_task_dependency_pair'),
    )
    op.create_index('ix_project_task_dependencies_task_id', 'project_task_dependencies', ['task_id'])
    op.create_index(
        'ix_project_task_dependencies_depends_on_task_id', 'project_task_dependencies', ['depends_on_task_id']
    )

    op.create_table(
        'invoices',
        sa.Column('invoice_id', UUID, primary_key=True),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.company_id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'appointment_id', UUID, sa.ForeignKey('appointments.appointment_id', ondelete='SET NULL'), nullable=True
        ),
        sa.Column('invoice_number', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='draft'),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('tax_total', sa.Numeric(12, 2), nullable=False),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        _created_at(),
        sa.UniqueConstraint('company_id', 'invoice_number', name='uq_invoices_company_number'),
    )
    op.create_index('ix_invoices_company_id', 'invoices', ['company_id'])
    op.create_index('ix_invoices_appointment_id', 'invoices', ['appointment_id'])

    op.create_table(
        'invoice_line_items',
        sa.Column('line_item_id', UUID, primary_key=True),
        sa.Column('invoice_id', UUID, sa.ForeignKey('invoices.invoice_id', ondelete='CASCADE'), nullable=False),
        sa.Column('worker_id', UUID, sa.ForeignKey('workers.worker_id', ondelete='SET NULL'), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Numeric(10, 2), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('line_total', sa.Numeric(12, 2), nullable=False),
        sa.Column('is_gst_free', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('time_log_ids', sa.JSON(), nullable=False),
    )
    op.create_index('ix_invoice_line_items_invoice_id', 'invoice_line_items', ['invoice_id'])

    op.create_table(
        'time_logs',
        sa.Column('time_log_id', UUID, primary_key=True),
        sa.Column(
            'appointment_id', UUID, sa.ForeignKey('appointments.appointment_id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('worker_id', UUID, sa.ForeignKey('workers.worker_id', ondelete='CASCADE'), nullable=False),
        sa.Column('clock_in', sa.DateTime(timezone=True), nullable=False),
        sa.Column('clock_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('check_out_lat', sa.Float(), nullable=True),
        sa.Column('check_out_lng', sa.Float(), nullable=True),
        sa.Column('hourly_rate', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('overhead_percentage', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('total_hours', sa.Numeric(8, 2), nullable=True),
        sa.Column('total_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', time_log_status, nullable=False, server_default='in_progress'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('invoice_id', UUID, sa.ForeignKey('invoices.invoice_id', ondelete='SET NULL'), nullable=True),
        _created_at(),
    )
    op.create_index('ix_time_logs_appointment_id', 'time_logs', ['appointment_id'])
    op.create_index('ix_time_logs_worker_id', 'time_logs', ['worker_id'])
    op.create_index('ix_time_logs_invoice_id', 'time_logs', ['invoice_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('time_logs')
    op.drop_table('invoice_line_items')
    op.drop_table('invoices')
    op.drop_table('project_task_dependencies')
    op.drop_table('project_tasks')
    op.drop_table('projects')
    op.drop_table('appointments')
    op.drop_table('worker_seasonal_availability_dates')
    op.drop_table('worker_seasonal_availability')
    op.drop_table('worker_unavailability')
    op.drop_table('worker_schedule')
    op.drop_table('workers')
    op.drop_table('companies')

    bind = op.get_bind()
    time_log_status.drop(bind, checkfirst=True)
    dependency_type.drop(bind, checkfirst=True)
    appointment_status.drop(bind, checkfirst=True)
