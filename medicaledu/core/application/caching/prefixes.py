# medicaledu/core/application/caching/prefixes.py


class CachePrefixes:
    """Prefixes shared by cached queries and the commands that invalidate them."""

    # Courses
    GET_ALL_COURSES = "GetAllCourses"
    GET_COURSE_BY_ID = "GetCourseById"
    GET_COURSES_BY_INSTRUCTOR = "GetCoursesByInstructor"
    GET_COURSES_BY_CATEGORY = "GetCoursesByCategory"

    # Users
    GET_ALL_USERS = "GetAllUsers"
    GET_USER_BY_ID = "GetUserById"
    GET_USERS_BY_ROLE = "GetUsersByRole"

    # Enrollments
    GET_ENROLLMENTS = "GetEnrollments"
    GET_ENROLLMENTS_BY_USER = "GetEnrollmentsByUser"
    GET_ENROLLMENTS_BY_COURSE = "GetEnrollmentsByCourse"

    # Bookings
    GET_BOOKINGS = "GetBookings"
    GET_BOOKINGS_BY_USER = "GetBookingsByUser"
    GET_BOOKINGS_BY_INSTRUCTOR = "GetBookingsByInstructor"

    # Availability slots
    GET_AVAILABILITY_SLOTS = "GetAvailabilitySlots"
    GET_AVAILABILITY_SLOTS_BY_INSTRUCTOR = "GetAvailabilitySlotsByInstructor"

    # Payments
    GET_PAYMENTS = "GetPayments"
    GET_PAYMENTS_BY_USER = "GetPaymentsByUser"

    # Ratings
    GET_COURSE_RATINGS = "GetCourseRatings"
    GET_INSTRUCTOR_RATINGS = "GetInstructorRatings"

    # Notifications
    GET_NOTIFICATIONS = "GetNotifications"
    GET_NOTIFICATIONS_BY_USER = "GetNotificationsByUser"

    # Promo codes
    GET_PROMO_CODES = "GetPromoCodes"
