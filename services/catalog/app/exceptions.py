"""Domain exception classes for the catalog service.

These are raised by service-layer code and caught by controllers
to map to appropriate HTTP responses.

Not-found errors are raised both when a row does not exist and when it exists
outside the viewer's tenant or soft-delete scope; callers cannot tell the two
apart.
"""


class CatalogNotFoundError(Exception):
    """Base for lookups that found nothing visible to the viewer."""

    entity = "Resource"

    def __init__(self, identifier: object = ""):
        self.identifier = identifier
        super().__init__(f"{self.entity} not found: {identifier}")


class CourseNotFoundError(CatalogNotFoundError):
    entity = "Course"


class ModuleNotFoundError(CatalogNotFoundError):
    entity = "Course module"


class TopicNotFoundError(CatalogNotFoundError):
    entity = "Course topic"


class VideoNotFoundError(CatalogNotFoundError):
    entity = "Video"


class CourseNameConflictError(Exception):
    """Raised when a course name already exists within the tenant."""

    def __init__(self, course_name: str = ""):
        self.course_name = course_name
        super().__init__(f"Course name already exists within tenant: {course_name}")


class CrossTenantAccessError(Exception):
    """Raised when a non-privileged principal targets another tenant."""


class InsufficientRoleError(Exception):
    """Raised when the viewer's role may not perform the operation."""


class InvalidSortFieldError(Exception):
    """Raised when a caller-supplied sort field is not on the allow-list."""

    def __init__(self, field: str = ""):
        self.field = field
        super().__init__(f"Unsupported sort field: {field}")


class InvalidFilterError(Exception):
    """Raised when a filter value is well-typed but meaningless (e.g. min > max)."""
