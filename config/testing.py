import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

EVENT_TIMEZONE = "UTC"
LOCAL_TIMEZONE = "UTC"
REQUEST_MAX_RETRIES = 1
TEMP_EMAIL_DOMAIN = "temp.local"

AUTO_INIT_DB = False
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = ""
