"""Root conftest — shared test configuration."""

import os

# Ensure tests don't accidentally use real API keys or wait on real delays
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("CLAIM_SETTLE_DELAY_SECONDS", "0")
os.environ.setdefault("EXPIRY_WATCH_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")
