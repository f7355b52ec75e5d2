from datetime import date as date_type
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Float, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base
from .appointment import AppointmentStatus

WEEKDAYS = (
    "monday", "tuesday", "wednesday", "thursday",
    "friday", "saturday", "sunday",
)

def weekday_name(day: date_type) -> str:
    return WEEKDAYS[day.weekday()]

class Doctor(Base):
    __tablename__ = "doctors"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    
    # Profile
    name = Column(String(150), nullable=False, index=True)
    speciality = Column(String(100), nullable=False, index=True)
    fees = Column(Integer, nullable=False, default=0)
    
    # Clinic location
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    
    # Cumulative rating stats
    rate = Column(Float, nullable=False, default=0)
    rating_num = Column(Integer, nullable=False, default=0)
    
    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    
    # Relationships
    user = relationship("User", back_populates="doctor")
    available_times = relationship(
        "DoctorAvailability",
        back_populates="doctor",
        cascade="all, delete-orphan",
        order_by="DoctorAvailability.time",
    )
    appointments = relationship("Appointment", back_populates="doctor")
    ratings = relationship("Rating", back_populates="doctor")
    
    def times_for(self, day: date_type) -> list:
        """Published times for the weekday of ``day``."""
        name = weekday_name(day)
        return [slot.time for slot in self.available_times if slot.day == name]
    
    def is_available(self, day: date_type, time: str) -> bool:
        """Check the slot is published and not already taken. Never writes."""
        if time not in self.times_for(day):
            return False
        return not any(
            appointment.date == day
            and appointment.time == time
            and appointment.status != AppointmentStatus.CANCELLED
            for appointment in self.appointments
        )
    
    def schedule(self) -> dict:
        """Published times grouped by weekday."""
        grouped = {}
        for slot in self.available_times:
            grouped.setdefault(slot.day, []).append(slot.time)
        return grouped
    
    def __repr__(self):
        return f"<Doctor(id={self.id}, name='{self.name}', speciality='{self.speciality}')>"

class DoctorAvailability(Base):
    __tablename__ = "doctor_available_times"
    __table_args__ = (
        UniqueConstraint("doctor_id", "day", "time", name="uq_doctor_day_time"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    day = Column(String(10), nullable=False)  # lowercase weekday name
    time = Column(String(5), nullable=False)  # HH:MM
    
    doctor = relationship("Doctor", back_populates="available_times")
    
    def __repr__(self):
        return f"<DoctorAvailability(doctor_id={self.doctor_id}, day='{self.day}', time='{self.time}')>"
