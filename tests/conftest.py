import os

# Settings are read at import time; point them at an in-memory database first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from schoolhub.database import Base, get_db
from schoolhub.core.config import settings
from schoolhub.core.permissions import SUPER_ADMIN_ROLE
from schoolhub.core.security import create_access_token
from schoolhub.crud import tenant as tenant_crud, user as user_crud
from schoolhub.crud import role as role_crud, permission as permission_crud
from schoolhub.models.tenant import Tenant, TenantStatus
from schoolhub.models.teacher import Teacher, Gender
from schoolhub.models.student import Student, StudentEnrollment, EnrollmentStatus
from schoolhub.models.parent import Parent, ParentStudentRelation, RelationshipType
from schoolhub.models.school_class import SchoolClass
from schoolhub.models.subject import Subject
from schoolhub.models.schedule import Schedule, ScheduleType, ScheduleStatus
from schoolhub.schemas.tenant import TenantCreate

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


def auth_headers(user) -> dict:
    token = create_access_token(
        data={"id": str(user.id), "email": user.email, "tenant_id": user.tenant_id}
    )
    return {"Authorization": f"Bearer {token}"}


def bootstrap_school(db, domain: str, admin_email: str = None):
    """Create a tenant with its default roles and admin; returns (tenant, admin, roles)."""
    return tenant_crud.create_with_admin(db, obj_in=TenantCreate(
        name=f"{domain.split('.')[0].title()} School",
        email=f"office@{domain}",
        domain=domain,
        admin_first_name="Amina",
        admin_last_name="Mushi",
        admin_email=admin_email or f"admin@{domain}",
        admin_password="AdminPass123",
    ))


@pytest.fixture
def school(db):
    tenant, admin, roles = bootstrap_school(db, "alpha.ac.tz")
    return {"tenant": tenant, "admin": admin, "roles": {r.name: r for r in roles}, "headers": auth_headers(admin)}


@pytest.fixture
def other_school(db):
    tenant, admin, roles = bootstrap_school(db, "beta.ac.tz")
    return {"tenant": tenant, "admin": admin, "roles": {r.name: r for r in roles}, "headers": auth_headers(admin)}


@pytest.fixture
def super_admin(db):
    catalogue = permission_crud.ensure_catalogue(db)
    role = role_crud.create_with_permissions(
        db, tenant_id=None, name=SUPER_ADMIN_ROLE, description="Platform",
        permissions=catalogue, is_system=True, commit=False,
    )
    platform = Tenant(name="Platform", email="ops@platform.io", domain="platform", status=TenantStatus.ACTIVE)
    db.add(platform)
    db.flush()
    user = user_crud.create_account(
        db, tenant_id=platform.id, email="root@platform.io", password="RootPass123",
        first_name="Root", last_name="Operator", commit=False,
    )
    role_crud.assign_user(db, user_id=user.id, role_id=role.id, tenant_id=platform.id, commit=False)
    db.commit()
    return {"user": user, "headers": auth_headers(user)}


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(tenant_id: int, roles=(), email: str = None):
        counter["n"] += 1
        user = user_crud.create_account(
            db, tenant_id=tenant_id,
            email=email or f"user{counter['n']}@example.org",
            password="UserPass123", first_name="User", last_name=str(counter["n"]),
            commit=False,
        )
        for role in roles:
            role_crud.assign_user(db, user_id=user.id, role_id=role.id, tenant_id=tenant_id, commit=False)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_teacher(db, make_user):
    counter = {"n": 0}

    def _make(tenant_id: int, code: str = None):
        counter["n"] += 1
        user = make_user(tenant_id)
        teacher = Teacher(
            tenant_id=tenant_id, user_id=user.id,
            teacher_code=code or f"T{counter['n']:03d}",
            date_of_birth=date(1985, 3, 14), gender=Gender.FEMALE,
        )
        db.add(teacher)
        db.commit()
        db.refresh(teacher)
        return teacher

    return _make


@pytest.fixture
def make_student(db, make_user):
    counter = {"n": 0}

    def _make(tenant_id: int):
        counter["n"] += 1
        user = make_user(tenant_id)
        student = Student(tenant_id=tenant_id, user_id=user.id, admission_number=f"ADM{counter['n']:04d}")
        db.add(student)
        db.commit()
        db.refresh(student)
        return student

    return _make


@pytest.fixture
def make_class(db):
    def _make(tenant_id: int, name: str):
        school_class = SchoolClass(tenant_id=tenant_id, class_name=name)
        db.add(school_class)
        db.commit()
        db.refresh(school_class)
        return school_class

    return _make


@pytest.fixture
def make_subject(db):
    def _make(tenant_id: int, code: str, name: str = None):
        subject = Subject(tenant_id=tenant_id, subject_code=code, subject_name=name or code)
        db.add(subject)
        db.commit()
        db.refresh(subject)
        return subject

    return _make


@pytest.fixture
def make_schedule(db):
    def _make(tenant_id: int, start: str, end: str, on_date: date = date(2025, 1, 15), **fields):
        values = {
            "title": "Lesson",
            "type": ScheduleType.CLASS,
            "status": ScheduleStatus.ACTIVE,
        }
        values.update(fields)
        schedule = Schedule(
            tenant_id=tenant_id, date=on_date,
            start_time=time.fromisoformat(start), end_time=time.fromisoformat(end),
            **values,
        )
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    return _make


@pytest.fixture
def make_parent(db, make_user):
    def _make(tenant_id: int, parent_role=None):
        user = make_user(tenant_id, roles=[parent_role] if parent_role else ())
        parent = Parent(tenant_id=tenant_id, user_id=user.id, relationship_type=RelationshipType.MOTHER)
        db.add(parent)
        db.commit()
        db.refresh(parent)
        return parent

    return _make


def link(db, parent, student, **fields):
    relation = ParentStudentRelation(
        tenant_id=parent.tenant_id, parent_id=parent.id, student_id=student.id,
        relationship_type=fields.pop("relationship_type", RelationshipType.MOTHER), **fields,
    )
    db.add(relation)
    db.commit()
    return relation


def enroll(db, student, school_class, status=EnrollmentStatus.ACTIVE):
    enrollment = StudentEnrollment(
        tenant_id=student.tenant_id, student_id=student.id, class_id=school_class.id,
        status=status, enrollment_date=date(2024, 9, 1),
    )
    db.add(enrollment)
    db.commit()
    return enrollment
