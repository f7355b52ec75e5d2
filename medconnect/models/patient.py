from datetime import date as date_type
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Float
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base
from .appointment import AppointmentStatus

class Patient(Base):
    __tablename__ = "patients"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    
    # Personal information
    name = Column(String(150), nullable=False)
    
    # Physical stats
    weight = Column(Float, nullable=True)  # kg
    height = Column(Float, nullable=True)  # cm
    bmi = Column(Float, nullable=True)
    
    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    
    # Relationships
    user = relationship("User", back_populates="patient")
    appointments = relationship("Appointment", back_populates="patient")
    emrs = relationship("EMR", back_populates="patient")
    reminders = relationship(
        "MedicineReminder",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="MedicineReminder.id",
    )
    
    def is_available(self, day: date_type, time: str) -> bool:
        """Check none of the patient's appointments occupies the slot. Never writes."""
        return not any(
            appointment.date == day
            and appointment.time == time
            and appointment.status != AppointmentStatus.CANCELLED
            for appointment in self.appointments
        )
    
    def __repr__(self):
        return f"<Patient(id={self.id}, name='{self.name}')>"
