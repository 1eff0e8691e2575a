import os
import tempfile

# Settings are read at import time: point them at a throwaway SQLite file first.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="socketspeak-tests-")

os.environ.update(
    {
        "FRONTEND_URL": "http://localhost:5173",
        "DB_DRIVER_NAME": "sqlite",
        "DB_DATABASE_NAME": os.path.join(_TEST_DB_DIR, "test.db"),
        "DB_USERNAME": "",
        "DB_PASSWORD": "",
        "DB_HOST": "",
        "ACCESS_TOKEN_EXPIRE_MINUTES": "30",
        "SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
        "ALGORITHM": "HS256",
        "INIT_MODE": "test",
        "CLOUDINARY_CLOUD_NAME": "test",
        "CLOUDINARY_API_KEY": "test",
        "CLOUDINARY_API_SECRET": "test",
        "COOKIE_SECURE": "false",
        "LOG_LEVEL": "DEBUG",
    }
)
