import enum


class UserRole(str, enum.Enum):
    ADMIN = "Admin"
    INSTRUCTOR = "Instructor"
    STUDENT = "Student"


class BookingStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"
    NO_SHOW = "NoShow"
    RESCHEDULED = "Rescheduled"


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"
    PARTIALLY_REFUNDED = "PartiallyRefunded"


class PaymentProvider(str, enum.Enum):
    STRIPE = "Stripe"
    PAYPAL = "PayPal"
    MANUAL = "Manual"


class DifficultyLevel(str, enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class NotificationType(str, enum.Enum):
    BOOKING_CONFIRMATION = "BookingConfirmation"
    BOOKING_REMINDER = "BookingReminder"
    BOOKING_CANCELLATION = "BookingCancellation"
    PAYMENT_CONFIRMATION = "PaymentConfirmation"
    PAYMENT_FAILED = "PaymentFailed"
    COURSE_PUBLISHED = "CoursePublished"
    EMAIL_VERIFICATION = "EmailVerification"
    PASSWORD_RESET = "PasswordReset"
    GENERAL_ANNOUNCEMENT = "GeneralAnnouncement"
    BOOKING_RESCHEDULED = "BookingRescheduled"
    COURSE_UPDATED = "CourseUpdated"


class AuditActionType(str, enum.Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    LOGIN = "Login"
    LOGOUT = "Logout"
    EMAIL_CONFIRMATION = "EmailConfirmation"
    PASSWORD_RESET = "PasswordReset"
    BOOKING_CREATED = "BookingCreated"
    BOOKING_UPDATED = "BookingUpdated"
    PAYMENT_PROCESSED = "PaymentProcessed"


class DiscountType(str, enum.Enum):
    PERCENTAGE = "Percentage"
    FIXED_AMOUNT = "FixedAmount"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"
