import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

APPOINTMENT_STATUSES = ("scheduled", "confirmed", "cancelled", "completed", "no_show")
PROFILE_ROLES = ("admin", "manager", "supervisor", "front_desk", "doctor")


def generate_id():
    """Generate a UUID primary key (rows are addressed by UUID like the hosted store)"""
    return str(uuid.uuid4())


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    tax_id = Column(String(20), nullable=True)  # CNPJ
    created_at = Column(DateTime, server_default=func.now())

    units = relationship("Unit", back_populates="organization", cascade="all, delete-orphan")
    profiles = relationship("Profile", back_populates="organization")


class Unit(Base):
    __tablename__ = "units"

    id = Column(String(36), primary_key=True, default=generate_id)
    organization_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)
    phone = Column(String(50), nullable=True)
    opening_time = Column(String(5), nullable=True)  # HH:MM
    closing_time = Column(String(5), nullable=True)  # HH:MM, may be earlier than opening (overnight)
    visit_duration = Column(Integer, default=15, nullable=False)  # minutes
    created_at = Column(DateTime, server_default=func.now())

    organization = relationship("Organization", back_populates="units")


class Profile(Base):
    """Staff member of an organization, linked to an external auth identity"""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), unique=True, nullable=True, index=True)
    organization_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="front_desk")
    current_unit_id = Column(String(36), ForeignKey("units.id", ondelete="SET NULL"), nullable=True)
    default_unit_id = Column(String(36), ForeignKey("units.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    organization = relationship("Organization", back_populates="profiles")
    current_unit = relationship("Unit", foreign_keys=[current_unit_id])
    default_unit = relationship("Unit", foreign_keys=[default_unit_id])


class Specialty(Base):
    __tablename__ = "specialties"

    id = Column(String(36), primary_key=True, default=generate_id)
    organization_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(String(36), primary_key=True, default=generate_id)
    organization_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    license_number = Column(String(50), nullable=True)  # CRM
    specialty_id = Column(String(36), ForeignKey("specialties.id", ondelete="SET NULL"), nullable=True)
    user_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    specialty = relationship("Specialty")


class Patient(Base):
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=generate_id)
    organization_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    tax_id = Column(String(14), nullable=True)  # CPF, digits only
    birth_date = Column(Date, nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class AppointmentType(Base):
    __tablename__ = "appointment_types"

    id = Column(String(36), primary_key=True, default=generate_id)
    organization_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Insurer(Base):
    __tablename__ = "insurers"

    id = Column(String(36), primary_key=True, default=generate_id)
    organization_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    plans = relationship("InsurancePlan", back_populates="insurer", cascade="all, delete-orphan")


class InsurancePlan(Base):
    __tablename__ = "insurance_plans"

    id = Column(String(36), primary_key=True, default=generate_id)
    insurer_id = Column(String(36), ForeignKey("insurers.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    insurer = relationship("Insurer", back_populates="plans")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    organization_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    unit_id = Column(String(36), ForeignKey("units.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("doctors.id"), nullable=False, index=True)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False)
    appointment_type_id = Column(String(36), ForeignKey("appointment_types.id"), nullable=True)
    insurer_id = Column(String(36), ForeignKey("insurers.id"), nullable=True)
    insurance_plan_id = Column(String(36), ForeignKey("insurance_plans.id"), nullable=True)
    start_at = Column(DateTime, nullable=False, index=True)
    end_at = Column(DateTime, nullable=False)
    # scheduled, confirmed, cancelled, completed, no_show - any status may follow any other
    status = Column(String(20), default="scheduled", nullable=False, index=True)
    notes = Column(Text, nullable=True)
    fit_in = Column(Boolean, default=False, nullable=False)  # squeezed outside regular slots
    booked_by_id = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    patient = relationship("Patient")
    doctor = relationship("Doctor")
    appointment_type = relationship("AppointmentType")
    insurer = relationship("Insurer")
    insurance_plan = relationship("InsurancePlan")


class ScheduleConfig(Base):
    """Weekday working hours of a doctor at a unit"""

    __tablename__ = "schedule_configs"

    id = Column(String(36), primary_key=True, default=generate_id)
    doctor_id = Column(String(36), ForeignKey("doctors.id"), nullable=False, index=True)
    unit_id = Column(String(36), ForeignKey("units.id"), nullable=False, index=True)
    weekday = Column(Integer, nullable=False)  # 0 = Monday
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    visit_duration = Column(Integer, nullable=False)


class ScheduleBlock(Base):
    """Period in which a unit (doctor_id null) or a single doctor takes no appointments"""

    __tablename__ = "schedule_blocks"

    id = Column(String(36), primary_key=True, default=generate_id)
    organization_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    unit_id = Column(String(36), ForeignKey("units.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("doctors.id"), nullable=True)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    reason = Column(String(500), nullable=True)
