from .content import Content
from .parent import Parent, ParentStudentRelation
from .permission import Permission
from .role import Role, RolePermission, UserRole
from .schedule import Schedule
from .school_class import SchoolClass
from .student import Student, StudentEnrollment
from .student_record import AcademicRecord, AttendanceRecord, Grade, HealthRecord
from .subject import Subject
from .teacher import Teacher, TeacherSubject, TeacherQualification
from .tenant import Tenant
from .user import User
