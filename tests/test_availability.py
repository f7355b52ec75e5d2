from datetime import date

from medconnect.models.appointment import Appointment, AppointmentStatus, PaymentMethod
from medconnect.models.doctor import Doctor, DoctorAvailability, weekday_name
from medconnect.models.patient import Patient

MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)

def booked(day, time, status=AppointmentStatus.PENDING):
    return Appointment(date=day, time=time, status=status, payment_method=PaymentMethod.CASH)

def make_doctor(*appointments):
    doctor = Doctor(name="Dr. Mona Adel", speciality="dermatology")
    doctor.available_times = [
        DoctorAvailability(day="monday", time="10:00"),
        DoctorAvailability(day="monday", time="11:00"),
        DoctorAvailability(day="tuesday", time="09:00"),
    ]
    doctor.appointments = list(appointments)
    return doctor

class TestDoctorAvailability:

    def test_weekday_name(self):
        assert weekday_name(MONDAY) == "monday"
        assert weekday_name(TUESDAY) == "tuesday"

    def test_published_free_slot(self):
        """A published slot with no appointment can be booked."""
        assert make_doctor().is_available(MONDAY, "10:00")

    def test_unpublished_time(self):
        assert not make_doctor().is_available(MONDAY, "09:00")

    def test_time_published_on_another_day(self):
        """Times are checked against the weekday of the requested date."""
        assert not make_doctor().is_available(TUESDAY, "10:00")

    def test_taken_slot(self):
        doctor = make_doctor(booked(MONDAY, "10:00"))
        assert not doctor.is_available(MONDAY, "10:00")
        assert doctor.is_available(MONDAY, "11:00")

    def test_cancelled_appointment_frees_slot(self):
        doctor = make_doctor(booked(MONDAY, "10:00", AppointmentStatus.CANCELLED))
        assert doctor.is_available(MONDAY, "10:00")

    def test_schedule_groups_by_day(self):
        assert make_doctor().schedule() == {
            "monday": ["10:00", "11:00"],
            "tuesday": ["09:00"],
        }

    def test_check_does_not_mutate(self):
        doctor = make_doctor(booked(MONDAY, "10:00"))
        doctor.is_available(MONDAY, "11:00")
        assert len(doctor.appointments) == 1

class TestPatientAvailability:

    def test_free_patient(self):
        patient = Patient(name="Sara")
        patient.appointments = []
        assert patient.is_available(MONDAY, "10:00")

    def test_same_date_and_time_conflicts(self):
        patient = Patient(name="Sara")
        patient.appointments = [booked(MONDAY, "10:00")]
        assert not patient.is_available(MONDAY, "10:00")

    def test_exact_match_only(self):
        """Slots are matched on (date, time) equality, not overlapping intervals."""
        patient = Patient(name="Sara")
        patient.appointments = [booked(MONDAY, "10:00")]
        assert patient.is_available(MONDAY, "10:30")
        assert patient.is_available(TUESDAY, "10:00")
