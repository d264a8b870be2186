import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Calendar days for clock events are cut in this zone ("UTC" or an IANA name)
EVENT_TIMEZONE = os.getenv("EVENT_TIMEZONE", "UTC")

# Wall clock for "has today's 18:00 cutoff passed"; blank means the server's own zone
LOCAL_TIMEZONE = os.getenv("LOCAL_TIMEZONE", "")

REQUEST_MAX_RETRIES = int(os.getenv("REQUEST_MAX_RETRIES", "3"))
TEMP_EMAIL_DOMAIN = os.getenv("TEMP_EMAIL_DOMAIN", "temp.local")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
