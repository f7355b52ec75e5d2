from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class MedicineReminder(Base):
    __tablename__ = "medicine_reminders"
    
    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    
    name = Column(String(150), nullable=False)
    type = Column(String(50), nullable=False)  # pill, syrup, injection...
    frequency = Column(Integer, nullable=False)  # hours between doses
    next_reminder = Column(DateTime, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    
    patient = relationship("Patient", back_populates="reminders")
    
    def __repr__(self):
        return f"<MedicineReminder(id={self.id}, patient_id={self.patient_id}, name='{self.name}', active={self.active})>"
