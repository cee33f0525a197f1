"""Test package: point the app at a throwaway in-memory database before config loads."""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ.setdefault("LOG_LEVEL", "WARNING")
