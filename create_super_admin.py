"""
Create the first super admin (and the tenant that hosts it).

Usage:
    python create_super_admin.py <email> <password> [name] [company_name] [slug]
"""
import sys

from finance_saas import create_app
from finance_saas.extensions import db
from finance_saas.services.provisioning import provision_tenant


def main():
    if len(sys.argv) < 3:
        print("Usage: python create_super_admin.py <email> <password> [name] [company_name] [slug]")
        print("\nExample:")
        print("  python create_super_admin.py admin@example.com S3nhaForte 'Admin' 'Plataforma' plataforma")
        return 1

    email = sys.argv[1]
    password = sys.argv[2]
    name = sys.argv[3] if len(sys.argv) > 3 else "Super Admin"
    company_name = sys.argv[4] if len(sys.argv) > 4 else "Plataforma"
    slug = sys.argv[5] if len(sys.argv) > 5 else "plataforma"

    app = create_app()
    with app.app_context():
        tenant, user = provision_tenant(company_name, slug, name, email, password)
        user.is_super_admin = True
        db.session.commit()
        print(f"✓ Super admin created: user_id={user.id} tenant_id={tenant.id} email={user.email}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
