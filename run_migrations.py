#!/usr/bin/env python
"""
Script to run database migrations before starting the server.
This ensures migrations run with proper Flask app context.
"""
import os
import sys

# Note: Set PYTHONUNBUFFERED=1 in environment for unbuffered output

print("=" * 60)
print("DATABASE MIGRATION SCRIPT STARTING")
print("=" * 60)

db_url = os.getenv('DATABASE_URL')
if not db_url:
    print("ERROR: DATABASE_URL environment variable is not set!")
    sys.exit(1)

print("✓ DATABASE_URL is set")
print(f"  Database: {db_url.split('/')[-1] if '/' in db_url else 'unknown'}")

try:
    from flask_migrate import upgrade, current
    from finance_saas import create_app
    from finance_saas.extensions import db

    app = create_app()
    print("✓ Flask app created successfully")

    with app.app_context():
        try:
            with db.engine.connect():
                print("✓ Database connection successful")
        except Exception as conn_error:
            print(f"✗ Database connection failed: {conn_error}")
            raise

        try:
            current()
        except Exception:
            print("No migration version found - this is a fresh database")

        upgrade()
        print("\n" + "=" * 60)
        print("✓ Migrations completed successfully!")
        print("=" * 60)

except Exception as e:
    print(f"\n✗ Migration error: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)
