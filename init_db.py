#!/usr/bin/env python3
"""
Database initialization script for the prompt storage service.
Creates the prompts and metadata tables at the configured path if they don't exist.
"""
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.absolute()
sys.path.insert(0, str(project_root))


def init_db() -> bool:
    """Initialize the database by creating necessary tables if they don't exist."""
    try:
        # Import here to ensure the path is set correctly
        from prompt_storage.app.core.config import settings
        from prompt_storage.app.crud import PromptStore

        db_path = Path(settings.DATABASE_PATH)
        print(f"🔨 Initializing {settings.STAGE} database...")

        # Opening the store creates missing tables and switches the file to WAL
        store = PromptStore(db_path, pool_size=1)
        store.close()

        if db_path.exists():
            print(f"✅ Database initialized successfully at: {db_path.resolve()}")
        else:
            print(f"⚠️  Database file not found after initialization at: {db_path}")
            print(f"    Please check if the directory exists and is writable: {db_path.parent}")
            return False

        return True

    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        return False


if __name__ == "__main__":
    print("=" * 60)
    print("🔧 Prompt Storage - Database Initialization")
    print("=" * 60)
    print("⚠️  This is a safe operation that will only create tables that don't exist.")
    print("    No existing data will be modified or deleted.")
    print("-" * 60)

    if init_db():
        print("\n✅ Database initialization completed successfully!")
    else:
        print("\n❌ Database initialization failed!")
        sys.exit(1)
