from schoolhub.services.authorization import authorization_service
from schoolhub.services.auth import auth_service
from schoolhub.services.tenant import tenant_service
from schoolhub.services.user import user_service
from schoolhub.services.role import role_service
from schoolhub.services.subject import subject_service
from schoolhub.services.school_class import school_class_service
from schoolhub.services.teacher import teacher_service
from schoolhub.services.student import student_service
from schoolhub.services.parent import parent_service
from schoolhub.services.schedule import schedule_service
from schoolhub.services.content import content_service

__all__ = [
    "authorization_service", "auth_service", "tenant_service", "user_service", "role_service",
    "subject_service", "school_class_service", "teacher_service", "student_service",
    "parent_service", "schedule_service", "content_service",
]
