"""create_school_tables

Revision ID: 0f3a9c2b7d41
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0f3a9c2b7d41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _tenant_fk():
    return sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenant.id', ondelete='CASCADE'), nullable=False, index=True)


def _user_ref(name):
    return sa.Column(name, sa.Integer(), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True)


gender = sa.Enum('MALE', 'FEMALE', 'OTHER', name='gender')
relationship_type = sa.Enum('FATHER', 'MOTHER', 'GUARDIAN', 'OTHER', name='relationshiptype')


def upgrade() -> None:
    """Create the tenant, access-control and school domain tables."""
    op.create_table(
        'tenant',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('domain', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('status', sa.Enum('TRIAL', 'ACTIVE', 'INACTIVE', 'SUSPENDED', name='tenantstatus'), nullable=False),
        sa.Column('subscription_plan', sa.String(), nullable=False),
        sa.Column('max_users', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('timezone', sa.String(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'permission',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('resource', sa.String(), nullable=False),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('email', sa.String(), nullable=False, index=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('status', sa.Enum('ACTIVE', 'INACTIVE', 'SUSPENDED', 'PENDING', name='userstatus'), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'email', name='uq_user_tenant_email'),
    )

    op.create_table(
        'role',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenant.id', ondelete='CASCADE'), nullable=True, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('is_system', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'name', name='uq_role_tenant_name'),
    )

    op.create_table(
        'role_permission',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('role.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('permission_id', sa.Integer(), sa.ForeignKey('permission.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('role_id', 'permission_id', name='uq_role_permission'),
    )

    op.create_table(
        'user_role',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('role.id', ondelete='CASCADE'), nullable=False),
        _tenant_fk(),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'role_id', name='uq_user_role'),
    )

    op.create_table(
        'subject',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('subject_name', sa.String(), nullable=False),
        sa.Column('subject_code', sa.String(), nullable=False),
        sa.Column('subject_level', sa.String(), nullable=True),
        sa.Column('subject_type', sa.String(), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'subject_code', name='uq_subject_tenant_code'),
    )

    op.create_table(
        'teacher',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('teacher_code', sa.String(), nullable=False),
        sa.Column('employee_number', sa.String(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', gender, nullable=False),
        sa.Column('nationality', sa.String(), nullable=True),
        sa.Column('qualification', sa.String(), nullable=True),
        sa.Column('experience', sa.Integer(), nullable=False),
        sa.Column('specialization', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('region', sa.String(), nullable=True),
        sa.Column('postal_code', sa.String(), nullable=True),
        sa.Column('emergency_contact', sa.String(), nullable=True),
        sa.Column('emergency_phone', sa.String(), nullable=True),
        sa.Column('emergency_relation', sa.String(), nullable=True),
        sa.Column('joining_date', sa.Date(), nullable=True),
        sa.Column('previous_school', sa.String(), nullable=True),
        sa.Column('teaching_license', sa.String(), nullable=True),
        sa.Column('license_expiry', sa.Date(), nullable=True),
        _user_ref('created_by'),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'teacher_code', name='uq_teacher_tenant_code'),
    )

    op.create_table(
        'school_class',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('class_name', sa.String(), nullable=False),
        sa.Column('class_code', sa.String(), nullable=True),
        sa.Column('grade_level', sa.String(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('class_teacher_id', sa.Integer(), sa.ForeignKey('teacher.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'class_name', name='uq_class_tenant_name'),
    )

    op.create_table(
        'teacher_subject',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('teacher.id', ondelete='CASCADE'), nullable=False),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subject.id', ondelete='CASCADE'), nullable=False),
        _user_ref('assigned_by'),
        *_timestamps(),
        sa.UniqueConstraint('teacher_id', 'subject_id', name='uq_teacher_subject'),
    )

    op.create_table(
        'teacher_qualification',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('teacher.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('institution', sa.String(), nullable=False),
        sa.Column('date_obtained', sa.Date(), nullable=False),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('certificate_number', sa.String(), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        _user_ref('created_by'),
        _user_ref('updated_by'),
        *_timestamps(),
    )

    op.create_table(
        'student',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('admission_number', sa.String(), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', gender, nullable=True),
        sa.Column('status', sa.Enum('ACTIVE', 'INACTIVE', 'GRADUATED', 'TRANSFERRED', name='studentstatus'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'admission_number', name='uq_student_tenant_admission'),
    )

    op.create_table(
        'student_enrollment',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id', ondelete='CASCADE'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('school_class.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'INACTIVE', 'COMPLETED', 'WITHDRAWN', name='enrollmentstatus'), nullable=False),
        sa.Column('enrollment_date', sa.Date(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('student_id', 'class_id', name='uq_student_class_enrollment'),
    )

    op.create_table(
        'parent',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('occupation', sa.String(), nullable=True),
        sa.Column('workplace', sa.String(), nullable=True),
        sa.Column('work_phone', sa.String(), nullable=True),
        sa.Column('education', sa.String(), nullable=True),
        sa.Column('relationship', relationship_type, nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('is_emergency', sa.Boolean(), nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'INACTIVE', name='parentstatus'), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'parent_student_relation',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('parent.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id', ondelete='CASCADE'), nullable=False),
        sa.Column('relationship', relationship_type, nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('is_emergency', sa.Boolean(), nullable=False),
        sa.Column('can_pickup', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'parent_id', 'student_id', name='uq_parent_student'),
    )

    op.create_table(
        'academic_record',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('academic_year', sa.String(), nullable=False),
        sa.Column('term', sa.String(), nullable=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('school_class.id', ondelete='SET NULL'), nullable=True),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subject.id', ondelete='SET NULL'), nullable=True),
        sa.Column('average_score', sa.Float(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=True),
        sa.Column('remarks', sa.String(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'attendance_record',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('school_class.id', ondelete='SET NULL'), nullable=True),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subject.id', ondelete='SET NULL'), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.Enum('PRESENT', 'ABSENT', 'LATE', 'EXCUSED', name='attendancestatus'), nullable=False),
        sa.Column('remarks', sa.String(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'grade',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subject.id', ondelete='SET NULL'), nullable=True),
        sa.Column('assessment', sa.String(), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('max_score', sa.Float(), nullable=False),
        sa.Column('grade', sa.String(4), nullable=True),
        sa.Column('recorded_on', sa.Date(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'health_record',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('record_type', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('recorded_on', sa.Date(), nullable=False),
        sa.Column('follow_up', sa.String(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'schedule',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('type', sa.Enum('CLASS', 'EXAM', 'EVENT', 'MEETING', name='scheduletype'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'CANCELLED', 'COMPLETED', 'DRAFT', name='schedulestatus'), nullable=False),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subject.id', ondelete='SET NULL'), nullable=True),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('teacher.id', ondelete='SET NULL'), nullable=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('school_class.id', ondelete='SET NULL'), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('recurring', sa.Boolean(), nullable=False),
        sa.Column('recurrence_type', sa.Enum('DAILY', 'WEEKLY', 'MONTHLY', name='recurrencetype'), nullable=True),
        sa.Column('recurrence_end', sa.Date(), nullable=True),
        sa.Column('recurrence_pattern', sa.String(), nullable=True),
        _user_ref('created_by'),
        _user_ref('updated_by'),
        *_timestamps(),
    )
    op.create_index('ix_schedule_teacher_date', 'schedule', ['tenant_id', 'teacher_id', 'date'])

    op.create_table(
        'content',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        _tenant_fk(),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('content_type', sa.Enum('DOCUMENT', 'VIDEO', 'IMAGE', 'PRESENTATION', 'OTHER', name='contenttype'), nullable=False),
        sa.Column('status', sa.Enum('DRAFT', 'PUBLISHED', 'ARCHIVED', name='contentstatus'), nullable=False),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subject.id', ondelete='SET NULL'), nullable=True),
        sa.Column('grade_level', sa.String(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('file_name', sa.String(), nullable=True),
        sa.Column('file_path', sa.String(), nullable=True),
        sa.Column('file_size', sa.BigInteger(), nullable=True),
        sa.Column('mime_type', sa.String(), nullable=True),
        _user_ref('created_by'),
        *_timestamps(),
    )


def downgrade() -> None:
    """Drop every school table and enum type."""
    for table in (
        'content', 'schedule', 'health_record', 'grade', 'attendance_record', 'academic_record',
        'parent_student_relation', 'parent', 'student_enrollment', 'student',
        'teacher_qualification', 'teacher_subject', 'school_class', 'teacher', 'subject',
        'user_role', 'role_permission', 'role', 'user', 'permission', 'tenant',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_name in (
        'contentstatus', 'contenttype', 'recurrencetype', 'schedulestatus', 'scheduletype',
        'attendancestatus', 'parentstatus', 'relationshiptype', 'enrollmentstatus', 'studentstatus',
        'gender', 'userstatus', 'tenantstatus',
    ):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
