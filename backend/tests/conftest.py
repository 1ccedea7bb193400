"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or relay
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("NOSTR_RELAYS", '["wss://relay.test"]')
os.environ.setdefault("LOG_FORMAT", "text")
