"""Scheduling repository - Database operations for appointments, schedule configs and blocks"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, ScheduleBlock, ScheduleConfig
from .agenda import AgendaBlock
from .reschedule import AgendaAppointment

logger = logging.getLogger(__name__)


def to_agenda_appointment(appt: Appointment) -> AgendaAppointment:
    """Resolve an appointment row and its joins into the agenda value object"""
    return AgendaAppointment(
        id=appt.id,
        doctor_id=appt.doctor_id,
        patient_id=appt.patient_id,
        start_at=appt.start_at,
        end_at=appt.end_at,
        status=appt.status,
        fit_in=bool(appt.fit_in),
        notes=appt.notes,
        patient_name=appt.patient.name if appt.patient else None,
        patient_phone=appt.patient.phone if appt.patient else None,
        doctor_name=appt.doctor.name if appt.doctor else None,
        appointment_type_name=appt.appointment_type.name if appt.appointment_type else None,
        insurer_name=appt.insurer.name if appt.insurer else None,
        insurance_plan_name=appt.insurance_plan.name if appt.insurance_plan else None,
    )


def to_agenda_block(block: ScheduleBlock) -> AgendaBlock:
    return AgendaBlock(
        id=block.id,
        doctor_id=block.doctor_id,
        start_at=block.start_at,
        end_at=block.end_at,
        reason=block.reason,
    )


class SchedulingRepository:
    """Repository for scheduling database operations"""

    @staticmethod
    def get_appointments(
        db: Session,
        organization_id: str,
        unit_id: str,
        window_start: datetime,
        window_end: datetime,
        doctor_id: Optional[str] = None,
    ) -> list[Appointment]:
        """Appointments of a unit fully inside [window_start, window_end]"""
        query = (
            db.query(Appointment)
            .options(
                joinedload(Appointment.patient),
                joinedload(Appointment.doctor),
                joinedload(Appointment.appointment_type),
                joinedload(Appointment.insurer),
                joinedload(Appointment.insurance_plan),
            )
            .filter(
                Appointment.organization_id == organization_id,
                Appointment.unit_id == unit_id,
                Appointment.start_at >= window_start,
                Appointment.end_at <= window_end,
            )
        )

        if doctor_id:
            query = query.filter(Appointment.doctor_id == doctor_id)

        return query.order_by(Appointment.start_at.asc()).all()

    @staticmethod
    def get_appointment(db: Session, appointment_id: str, organization_id: str) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def create_appointment(db: Session, **appointment_data) -> Appointment:
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        """Apply the given column updates"""
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)

        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()

    # Schedule configs
    @staticmethod
    def get_schedule_configs(db: Session, unit_id: str, doctor_id: Optional[str] = None) -> list[ScheduleConfig]:
        query = db.query(ScheduleConfig).filter(ScheduleConfig.unit_id == unit_id)
        if doctor_id:
            query = query.filter(ScheduleConfig.doctor_id == doctor_id)
        return query.order_by(ScheduleConfig.weekday.asc(), ScheduleConfig.start_time.asc()).all()

    @staticmethod
    def get_schedule_config(db: Session, config_id: str, unit_id: str) -> Optional[ScheduleConfig]:
        return (
            db.query(ScheduleConfig)
            .filter(ScheduleConfig.id == config_id, ScheduleConfig.unit_id == unit_id)
            .first()
        )

    @staticmethod
    def create_schedule_config(db: Session, **config_data) -> ScheduleConfig:
        config = ScheduleConfig(**config_data)
        db.add(config)
        db.commit()
        db.refresh(config)
        return config

    # Schedule blocks
    @staticmethod
    def get_blocks(
        db: Session,
        organization_id: str,
        unit_id: str,
        range_start: datetime,
        range_end: datetime,
    ) -> list[ScheduleBlock]:
        """General and doctor-specific blocks intersecting the range"""
        return (
            db.query(ScheduleBlock)
            .filter(
                ScheduleBlock.organization_id == organization_id,
                ScheduleBlock.unit_id == unit_id,
                ScheduleBlock.end_at >= range_start,
                ScheduleBlock.start_at <= range_end,
            )
            .order_by(ScheduleBlock.start_at.asc())
            .all()
        )

    @staticmethod
    def get_block(db: Session, block_id: str, organization_id: str) -> Optional[ScheduleBlock]:
        return (
            db.query(ScheduleBlock)
            .filter(ScheduleBlock.id == block_id, ScheduleBlock.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def create_block(db: Session, **block_data) -> ScheduleBlock:
        block = ScheduleBlock(**block_data)
        db.add(block)
        db.commit()
        db.refresh(block)
        return block

    @staticmethod
    def delete(db: Session, row) -> None:
        db.delete(row)
        db.commit()


class SqlAppointmentStore:
    """Appointment store backed by the database session, used by the agenda board"""

    def __init__(self, db: Session, organization_id: str):
        self.db = db
        self.organization_id = organization_id

    def update_appointment(
        self, appointment_id: str, start_at: datetime, end_at: datetime, doctor_id: str
    ) -> None:
        appointment = SchedulingRepository.get_appointment(self.db, appointment_id, self.organization_id)
        if appointment is None:
            raise LookupError(f"Appointment {appointment_id} no longer exists")

        try:
            appointment.start_at = start_at
            appointment.end_at = end_at
            appointment.doctor_id = doctor_id
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to persist move of appointment {appointment_id}: {e}")
            raise
