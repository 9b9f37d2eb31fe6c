from schoolhub.crud.base import CRUDBase, paginate
from schoolhub.crud.tenant import tenant
from schoolhub.crud.user import user
from schoolhub.crud.role import role, permission
from schoolhub.crud.subject import subject
from schoolhub.crud.school_class import school_class
from schoolhub.crud.teacher import teacher, teacher_subject, teacher_qualification
from schoolhub.crud.student import student, enrollment, student_records
from schoolhub.crud.parent import parent, parent_relation
from schoolhub.crud.schedule import schedule
from schoolhub.crud.content import content

__all__ = [
    "CRUDBase", "paginate", "tenant", "user", "role", "permission", "subject", "school_class",
    "teacher", "teacher_subject", "teacher_qualification", "student", "enrollment",
    "student_records", "parent", "parent_relation", "schedule", "content",
]
