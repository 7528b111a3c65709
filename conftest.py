# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Test environment: in-memory SQLite, no seed data, no outbound webhook."""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEFAULT_DATA"] = "false"
os.environ["FALLBACK_DEFAULT_SERVICES"] = "false"
os.environ["CALENDAR_WEBHOOK_URL"] = ""
