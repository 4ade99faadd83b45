# Import all models so Alembic can discover them via Base.metadata
from .course import Course
from .course_module import CourseModule
from .course_progress import StudentCourseProgress
from .course_session import CourseSession
from .course_topic import CourseTopic
from .course_video import CourseVideo
from .enrollment import Enrollment
from .program import CourseSpecialization, Program, Specialization, SpecializationProgram
from .teacher import Teacher, TeacherCourse
from .video_progress import VideoProgress

__all__ = [
    "Course",
    "CourseModule",
    "CourseSession",
    "CourseSpecialization",
    "CourseTopic",
    "CourseVideo",
    "Enrollment",
    "Program",
    "Specialization",
    "SpecializationProgram",
    "StudentCourseProgress",
    "Teacher",
    "TeacherCourse",
    "VideoProgress",
]
