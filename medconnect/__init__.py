"""
MedConnect

A FastAPI-based patient-doctor booking backend: doctor search, appointment
scheduling, EMR retrieval, medicine reminders, ratings and symptom diagnosis.
"""

__version__ = "1.0.0"
