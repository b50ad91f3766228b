# src/models/models.py

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text,
    Enum as SAEnum, UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def Money():
    # Floats out of the driver keep the 40/60 arithmetic plain
    return Numeric(12, 2, asdecimal=False)


# Exclusive upper bound of a Numeric(12, 2) amount
MAX_MONEY = 10 ** 10


# ============================================================================
# ENUMS
# ============================================================================

class UserType(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class AppointmentState(str, enum.Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    INSURANCE = "insurance"


class BillCategory(str, enum.Enum):
    RENT = "rent"
    UTILITIES = "utilities"
    SUPPLIES = "supplies"
    SALARIES = "salaries"
    MARKETING = "marketing"
    MAINTENANCE = "maintenance"
    OTHER = "other"


class Month(str, enum.Enum):
    ENERO = "ENERO"
    FEBRERO = "FEBRERO"
    MARZO = "MARZO"
    ABRIL = "ABRIL"
    MAYO = "MAYO"
    JUNIO = "JUNIO"
    JULIO = "JULIO"
    AGOSTO = "AGOSTO"
    SEPTIEMBRE = "SEPTIEMBRE"
    OCTUBRE = "OCTUBRE"
    NOVIEMBRE = "NOVIEMBRE"
    DICIEMBRE = "DICIEMBRE"

    @property
    def number(self) -> int:
        return list(Month).index(self) + 1


# ============================================================================
# USER MODELS
# ============================================================================

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(200), nullable=False)
    user_type = Column(SAEnum(UserType), nullable=False, default=UserType.USER)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, user_type={self.user_type.value})>"


# ============================================================================
# CLINICAL MODELS
# ============================================================================

class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    first_last_name = Column(String(100), nullable=False)
    second_last_name = Column(String(100), nullable=True)
    identification = Column(String(50), unique=True, nullable=False, index=True)
    number_phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    profession = Column(String(150), nullable=True)
    address = Column(Text, nullable=True)
    birthdate = Column(Date, nullable=True)
    creation_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.first_last_name or ''}".strip()

    def __repr__(self):
        return f"<Patient(id={self.id}, identification={self.identification})>"


class Appointment(Base):
    __tablename__ = "clinical_appointments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    appointment_date = Column(DateTime, nullable=False, index=True)
    query_type = Column(String(200), nullable=False, default="Consulta general")
    is_orthodontics = Column(Boolean, nullable=False, default=False)
    observations = Column(Text, nullable=True)
    state = Column(SAEnum(AppointmentState), nullable=False, default=AppointmentState.SCHEDULED)

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, state={self.state.value})>"


class Procedure(Base):
    __tablename__ = "procedures"

    id = Column(Integer, primary_key=True, autoincrement=True)
    appointment_id = Column(
        Integer, ForeignKey("clinical_appointments.id", ondelete="SET NULL"), unique=True, nullable=True
    )
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    procedure_date = Column(Date, nullable=False, index=True)
    procedure_description = Column(Text, nullable=False)
    total_cost = Column(Money(), nullable=False)
    payment_method = Column(SAEnum(PaymentMethod), nullable=False)
    is_orthodontics = Column(Boolean, nullable=False, default=False)
    observations = Column(Text, nullable=True)
    creation_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Procedure(id={self.id}, patient_id={self.patient_id}, total_cost={self.total_cost})>"


# ============================================================================
# FINANCIAL MODELS
# ============================================================================

class Bill(Base):
    __tablename__ = "bills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    description = Column(String(255), nullable=False)
    amount = Column(Money(), nullable=False)
    category = Column(SAEnum(BillCategory), nullable=False, default=BillCategory.OTHER)
    is_recurrent = Column(Boolean, nullable=False, default=False)
    bill_date = Column(Date, nullable=False, index=True)

    def __repr__(self):
        return f"<Bill(id={self.id}, amount={self.amount}, is_recurrent={self.is_recurrent})>"


class MonthlyClosing(Base):
    __tablename__ = "monthly_closings"
    __table_args__ = (UniqueConstraint("month", "year", name="uq_monthly_closing_period"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    month = Column(SAEnum(Month), nullable=False)
    year = Column(Integer, nullable=False)
    total_general_income = Column(Money(), nullable=False, default=0)
    total_clinical_orthodontic_income = Column(Money(), nullable=False, default=0)
    total_orthodontic_doctor_income = Column(Money(), nullable=False, default=0)
    total_fixed_expenses = Column(Money(), nullable=False, default=0)
    total_variable_expenses = Column(Money(), nullable=False, default=0)
    net_profit = Column(Money(), nullable=False, default=0)
    comment = Column(Text, nullable=True)
    closing_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<MonthlyClosing(id={self.id}, month={self.month.value}, year={self.year})>"
