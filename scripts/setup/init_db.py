"""
Initialize database — creates the peter_parker schema and its tables.
Run once before first launch; safe to re-run.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect

from app.config import settings
from app.exceptions import StoreInitError
from app.main import create_store


def main():
    print("🗄️  Parking Schedule DB Initialization")
    print("=" * 40)

    store = create_store()
    print(f"📡 Database: {store.engine.url.render_as_string(hide_password=True)}")

    try:
        with store.connection() as conn:
            tables = inspect(conn).get_table_names(schema=settings.DB_SCHEMA)
    except StoreInitError as e:
        print(f"❌ {e}")
        print("\nMake sure MySQL is running and DB_HOST / DB_PORT / DB_USER are set:")
        print("  docker-compose up -d db")
        sys.exit(1)

    print(f"\n📊 Tables in {settings.DB_SCHEMA} ({len(tables)} total):")
    for t in sorted(tables):
        print(f"   ✓ {t}")

    print("\n🎉 Database ready!")


if __name__ == "__main__":
    main()
