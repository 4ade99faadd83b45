import enum

from sqlalchemy import Enum as SaEnum


class CourseStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLIC = "PUBLIC"
    ARCHIVED = "ARCHIVED"
    SUSPENDED = "SUSPENDED"


class CourseType(str, enum.Enum):
    FREE = "FREE"
    PAID = "PAID"


class CourseEnrollmentType(str, enum.Enum):
    PAID_COURSE = "PAID_COURSE"
    FREE_COURSE = "FREE_COURSE"
    COURSE_SESSION = "COURSE_SESSION"


class EnrollmentStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"
    SUSPENDED = "SUSPENDED"


class CourseSessionStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    EXPIRED = "EXPIRED"


# Enrollment types that count as having bought access to a course.
PURCHASE_ENROLLMENT_TYPES = (
    CourseEnrollmentType.PAID_COURSE,
    CourseEnrollmentType.FREE_COURSE,
    CourseEnrollmentType.COURSE_SESSION,
)


# SQLAlchemy enum instances (reuse across models to avoid duplicate type creation)
course_status_enum = SaEnum(CourseStatus, name="course_status")
course_type_enum = SaEnum(CourseType, name="course_type")
course_enrollment_type_enum = SaEnum(CourseEnrollmentType, name="course_enrollment_type")
enrollment_status_enum = SaEnum(EnrollmentStatus, name="enrollment_status")
course_session_status_enum = SaEnum(CourseSessionStatus, name="course_session_status")
