"""
MedicalEdu API.

Backend for a medical-education marketplace: users, courses, availability
slots, bookings, payments, enrollments, ratings and notifications.

Every operation is a request object dispatched through the mediator in
``medicaledu.core.application.mediator`` and its pipeline behaviors.
"""

__version__ = "1.0.0"
