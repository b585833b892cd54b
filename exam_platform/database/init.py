"""
Database initialization script
Creates the database file and all tables from the ORM models
Run: python exam_platform/database/init.py
"""
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from exam_platform.core.database import engine, init_db


def main():
    """Initialize the database"""
    print("=" * 60)
    print("Initializing Exam Ledger Database")
    print("=" * 60)
    print(f"Database URL: {engine.url.render_as_string(hide_password=True)}")

    try:
        init_db()
        print("\n[SUCCESS] Database initialized successfully!")
    except Exception as e:
        print(f"\n[ERROR] Error initializing database: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
