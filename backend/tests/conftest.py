"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach real storage or the real media host
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "")
os.environ.setdefault("LOG_FORMAT", "text")
