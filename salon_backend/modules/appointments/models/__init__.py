from .appointment_models import Appointment, AppointmentStatus, BILLABLE_STATUSES

__all__ = ["Appointment", "AppointmentStatus", "BILLABLE_STATUSES"]
