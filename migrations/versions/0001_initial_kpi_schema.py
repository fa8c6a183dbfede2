"""initial kpi dashboard schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLE = sa.Enum('ADMIN', 'VP', 'AVP', 'MANAGER', 'EMPLOYEE', name='role')
INDIVIDUAL_KPI_TYPE = sa.Enum('CASCADED', 'COMMITTED', name='individualkpitype')
INDIVIDUAL_KPI_STATUS = sa.Enum(
    'DRAFT', 'COMMITTED', 'AGREED', 'IN_PROGRESS', 'MANAGER_REVIEW',
    'UPPER_MANAGER_APPROVAL', 'EMPLOYEE_ACKNOWLEDGED', 'CLOSED', 'REJECTED',
    name='individualkpistatus'
)
SUBMISSION_STATUS = sa.Enum('MANAGER_REVIEW', 'UPPER_MANAGER_APPROVAL', 'CLOSED', 'REJECTED', name='submissionstatus')


def _base_columns():
    return [
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'accounts',
        *_base_columns(),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'], unique=True)

    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('role', ROLE, nullable=False),
        sa.Column('menu_access', sa.JSON(), nullable=False),
    )

    op.create_table(
        'employees',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('department', sa.String(length=100)),
        sa.Column('position', sa.String(length=150)),
        sa.Column('manager', sa.String(length=255)),
        sa.Column('extra_fields', sa.JSON()),
    )
    op.create_index('ix_employees_department', 'employees', ['department'])

    op.create_table(
        'kpi_catalog',
        *_base_columns(),
        sa.Column('perspective', sa.String(length=100)),
        sa.Column('strategic_objective', sa.Text()),
        sa.Column('measure', sa.String(length=255)),
        sa.Column('target', sa.String(length=255)),
        sa.Column('unit', sa.String(length=50)),
        sa.Column('category', sa.String(length=100)),
        sa.Column('achievement', sa.Float()),
        sa.Column('extra_fields', sa.JSON()),
    )
    op.create_index('ix_kpi_catalog_perspective', 'kpi_catalog', ['perspective'])

    op.create_table(
        'monthly_kpis',
        *_base_columns(),
        sa.Column('parent_kpi_id', sa.String(length=64), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('target', sa.Float()),
        sa.Column('actual', sa.Float()),
        sa.Column('extra_fields', sa.JSON()),
    )
    op.create_index('ix_monthly_kpis_parent_kpi_id', 'monthly_kpis', ['parent_kpi_id'])

    op.create_table(
        'cascaded_kpis',
        *_base_columns(),
        sa.Column('corporate_kpi_id', sa.String(length=64), nullable=False),
        sa.Column('department', sa.String(length=100), nullable=False),
        sa.Column('department_target', sa.String(length=255), nullable=False),
        sa.Column('weight', sa.Integer(), nullable=False),
        sa.UniqueConstraint('corporate_kpi_id', 'department', name='uq_cascaded_kpi_department'),
    )
    op.create_index('ix_cascaded_kpis_corporate_kpi_id', 'cascaded_kpis', ['corporate_kpi_id'])
    op.create_index('ix_cascaded_kpis_department', 'cascaded_kpis', ['department'])

    op.create_table(
        'individual_kpis',
        *_base_columns(),
        sa.Column('employee_id', sa.String(length=64), nullable=False),
        sa.Column('kpi_id', sa.String(length=64), nullable=False),
        sa.Column('kpi_measure', sa.String(length=255), nullable=False),
        sa.Column('weight', sa.Integer(), nullable=False),
        sa.Column('type', INDIVIDUAL_KPI_TYPE, nullable=False),
        sa.Column('status', INDIVIDUAL_KPI_STATUS, nullable=False),
        sa.Column('target', sa.String(length=255)),
        sa.Column('task', sa.Text()),
        sa.Column('targets', sa.JSON()),
        sa.Column('notes', sa.Text()),
        sa.Column('rejection_reason', sa.Text()),
        sa.UniqueConstraint('employee_id', 'kpi_id', name='uq_individual_kpi_employee'),
    )
    op.create_index('ix_individual_kpis_employee_id', 'individual_kpis', ['employee_id'])
    op.create_index('ix_individual_kpis_status', 'individual_kpis', ['status'])

    op.create_table(
        'kpi_submissions',
        *_base_columns(),
        sa.Column('kpi_id', sa.String(length=64), nullable=False),
        sa.Column('kpi_measure', sa.String(length=255), nullable=False),
        sa.Column('submitted_by', sa.String(length=64), nullable=False),
        sa.Column('submitter_name', sa.String(length=255)),
        sa.Column('department', sa.String(length=100)),
        sa.Column('actual_value', sa.String(length=255), nullable=False),
        sa.Column('target_value', sa.String(length=255)),
        sa.Column('notes', sa.Text()),
        sa.Column('submission_date', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('status', SUBMISSION_STATUS, nullable=False),
        sa.Column('rejection_reason', sa.Text()),
    )
    op.create_index('ix_kpi_submissions_kpi_id', 'kpi_submissions', ['kpi_id'])
    op.create_index('ix_kpi_submissions_submitted_by', 'kpi_submissions', ['submitted_by'])
    op.create_index('ix_kpi_submissions_status', 'kpi_submissions', ['status'])

    for table, name_length in (('departments', 100), ('roles', 100)):
        op.create_table(
            table,
            *_base_columns(),
            sa.Column('name', sa.String(length=name_length)),
            sa.Column('description', sa.Text()),
            sa.Column('extra_fields', sa.JSON()),
        )

    op.create_table(
        'positions',
        *_base_columns(),
        sa.Column('name', sa.String(length=150)),
        sa.Column('department', sa.String(length=100)),
        sa.Column('extra_fields', sa.JSON()),
    )

    op.create_table(
        'settings',
        *_base_columns(),
        sa.Column('org_name', sa.String(length=255)),
        sa.Column('period', sa.String(length=100)),
        sa.Column('currency', sa.String(length=10)),
        sa.Column('period_date', sa.String(length=50)),
    )
    print("✓ [0001_initial] KPI dashboard tables created")


def downgrade() -> None:
    for table in (
        'settings', 'positions', 'roles', 'departments', 'kpi_submissions',
        'individual_kpis', 'cascaded_kpis', 'monthly_kpis', 'kpi_catalog',
        'employees', 'users', 'accounts',
    ):
        op.drop_table(table)
    for enum in (SUBMISSION_STATUS, INDIVIDUAL_KPI_STATUS, INDIVIDUAL_KPI_TYPE, ROLE):
        enum.drop(op.get_bind(), checkfirst=True)
