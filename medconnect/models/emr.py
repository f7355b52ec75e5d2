from sqlalchemy import Column, Integer, ForeignKey, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class EMR(Base):
    """Clinical record written by the doctor-side workflow; read-only here."""
    __tablename__ = "emrs"
    
    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), unique=True, nullable=False)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    
    diagnosis = Column(Text, nullable=True)
    prescription = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    
    appointment = relationship("Appointment", back_populates="emr")
    patient = relationship("Patient", back_populates="emrs")
    
    def __repr__(self):
        return f"<EMR(id={self.id}, appointment_id={self.appointment_id})>"
