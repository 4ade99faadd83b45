from enum import Enum


class Role(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    TENANT_ADMIN = "TENANT_ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


# Roles allowed to see non-public catalog rows and author courses.
STAFF_ROLES = frozenset({Role.TEACHER, Role.TENANT_ADMIN, Role.SUPER_ADMIN})
