"""
python -m scripts.create_super_admin --email admin@example.com --password 'change-me-now'

Seeds the permission catalogue, the platform-wide Super Admin role (granted
every permission) and a platform tenant holding the Super Admin account.
Safe to re-run: existing rows are reused.
"""

import argparse
import sys

sys.path.insert(0, ".")

from dotenv import load_dotenv
load_dotenv()

from schoolhub.database import SessionLocal
from schoolhub.models.tenant import Tenant, TenantStatus
from schoolhub.crud import tenant as tenant_crud, user as user_crud
from schoolhub.crud import role as role_crud, permission as permission_crud
from schoolhub.core.permissions import SUPER_ADMIN_ROLE

PLATFORM_DOMAIN = "platform"


def create_super_admin(email: str, password: str, first_name: str, last_name: str):
    """Create (or reuse) the platform tenant, Super Admin role and account."""
    db = SessionLocal()

    try:
        catalogue = permission_crud.ensure_catalogue(db)

        role = role_crud.get_by_name(db, name=SUPER_ADMIN_ROLE, tenant_id=None)
        if role is None:
            role = role_crud.create_with_permissions(
                db,
                tenant_id=None,
                name=SUPER_ADMIN_ROLE,
                description="Platform operator with every permission",
                permissions=catalogue,
                is_system=True,
                commit=False,
            )
            print(f"Created role: {SUPER_ADMIN_ROLE}")
        else:
            role_crud.set_permissions(db, role=role, permissions=catalogue)
            print(f"Refreshed grants on role: {SUPER_ADMIN_ROLE}")

        platform = tenant_crud.get_by_domain(db, PLATFORM_DOMAIN)
        if platform is None:
            platform = Tenant(
                name="SchoolHub Platform",
                email=email.lower(),
                domain=PLATFORM_DOMAIN,
                status=TenantStatus.ACTIVE,
            )
            db.add(platform)
            db.flush()
            print(f"Created platform tenant: {platform.id}")

        admin = user_crud.get_by_email(db, email=email, tenant_id=platform.id)
        if admin is None:
            admin = user_crud.create_account(
                db,
                tenant_id=platform.id,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                commit=False,
            )
            print(f"Created user: {admin.email}")

        if role_crud.get_assignment(db, user_id=admin.id, role_id=role.id) is None:
            role_crud.assign_user(
                db,
                user_id=admin.id,
                role_id=role.id,
                tenant_id=platform.id,
                commit=False,
            )

        db.commit()
        print(f"\n{admin.email} is a {SUPER_ADMIN_ROLE} (tenant domain '{PLATFORM_DOMAIN}')")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the platform Super Admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--first-name", default="Super")
    parser.add_argument("--last-name", default="Admin")
    args = parser.parse_args()
    create_super_admin(args.email, args.password, args.first_name, args.last_name)
