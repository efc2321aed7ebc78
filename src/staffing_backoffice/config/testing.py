import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "staffing_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 5

STORAGE_DIR = os.getenv("STORAGE_DIR", "./storage-test")
STORAGE_BASE_URL = "http://testserver/storage"

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
