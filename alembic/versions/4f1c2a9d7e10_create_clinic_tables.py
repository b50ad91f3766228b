"""create clinic tables

Revision ID: 4f1c2a9d7e10
Revises:
Create Date: 2026-10-19 09:12:04.518223

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9d7e10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

usertype = sa.Enum('ADMIN', 'USER', name='usertype')
appointmentstate = sa.Enum('SCHEDULED', 'CONFIRMED', 'COMPLETED', 'CANCELLED', 'NO_SHOW', name='appointmentstate')
paymentmethod = sa.Enum('CASH', 'CARD', 'TRANSFER', 'INSURANCE', name='paymentmethod')
billcategory = sa.Enum(
    'RENT', 'UTILITIES', 'SUPPLIES', 'SALARIES', 'MARKETING', 'MAINTENANCE', 'OTHER', name='billcategory'
)
month = sa.Enum(
    'ENERO', 'FEBRERO', 'MARZO', 'ABRIL', 'MAYO', 'JUNIO', 'JULIO', 'AGOSTO',
    'SEPTIEMBRE', 'OCTUBRE', 'NOVIEMBRE', 'DICIEMBRE', name='month'
)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('user_type', usertype, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'patients',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('middle_name', sa.String(length=100), nullable=True),
        sa.Column('first_last_name', sa.String(length=100), nullable=False),
        sa.Column('second_last_name', sa.String(length=100), nullable=True),
        sa.Column('identification', sa.String(length=50), nullable=False),
        sa.Column('number_phone', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('profession', sa.String(length=150), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('birthdate', sa.Date(), nullable=True),
        sa.Column('creation_date', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_patients_identification'), 'patients', ['identification'], unique=True)

    op.create_table(
        'clinical_appointments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('appointment_date', sa.DateTime(), nullable=False),
        sa.Column('query_type', sa.String(length=200), nullable=False),
        sa.Column('is_orthodontics', sa.Boolean(), nullable=False),
        sa.Column('observations', sa.Text(), nullable=True),
        sa.Column('state', appointmentstate, nullable=False),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_clinical_appointments_patient_id'), 'clinical_appointments', ['patient_id'])
    op.create_index(op.f('ix_clinical_appointments_appointment_date'), 'clinical_appointments', ['appointment_date'])

    op.create_table(
        'procedures',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('appointment_id', sa.Integer(), nullable=True),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('procedure_date', sa.Date(), nullable=False),
        sa.Column('procedure_description', sa.Text(), nullable=False),
        sa.Column('total_cost', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_method', paymentmethod, nullable=False),
        sa.Column('is_orthodontics', sa.Boolean(), nullable=False),
        sa.Column('observations', sa.Text(), nullable=True),
        sa.Column('creation_date', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['appointment_id'], ['clinical_appointments.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('appointment_id'),
    )
    op.create_index(op.f('ix_procedures_patient_id'), 'procedures', ['patient_id'])
    op.create_index(op.f('ix_procedures_procedure_date'), 'procedures', ['procedure_date'])

    op.create_table(
        'bills',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('category', billcategory, nullable=False),
        sa.Column('is_recurrent', sa.Boolean(), nullable=False),
        sa.Column('bill_date', sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_bills_bill_date'), 'bills', ['bill_date'])

    op.create_table(
        'monthly_closings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('month', month, nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('total_general_income', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_clinical_orthodontic_income', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_orthodontic_doctor_income', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_fixed_expenses', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_variable_expenses', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('net_profit', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('closing_date', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('month', 'year', name='uq_monthly_closing_period'),
    )


def downgrade() -> None:
    op.drop_table('monthly_closings')
    op.drop_index(op.f('ix_bills_bill_date'), table_name='bills')
    op.drop_table('bills')
    op.drop_index(op.f('ix_procedures_procedure_date'), table_name='procedures')
    op.drop_index(op.f('ix_procedures_patient_id'), table_name='procedures')
    op.drop_table('procedures')
    op.drop_index(op.f('ix_clinical_appointments_appointment_date'), table_name='clinical_appointments')
    op.drop_index(op.f('ix_clinical_appointments_patient_id'), table_name='clinical_appointments')
    op.drop_table('clinical_appointments')
    op.drop_index(op.f('ix_patients_identification'), table_name='patients')
    op.drop_table('patients')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

    # Drop the enum types
    for enum_type in (month, billcategory, paymentmethod, appointmentstate, usertype):
        enum_type.drop(op.get_bind(), checkfirst=True)
