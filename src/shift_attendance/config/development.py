import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# 'mysql' or 'memory'
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance"),
}

# Fixed local offset in minutes (300 = UTC+5, no DST)
UTC_OFFSET_MINUTES = int(os.getenv("UTC_OFFSET_MINUTES", "300"))
# 0 = Monday ... 6 = Sunday
WEEK_START = int(os.getenv("WEEK_START", "0"))
# 'paid' keeps break time in worked hours, 'unpaid' subtracts it
BREAK_POLICY = os.getenv("BREAK_POLICY", "paid")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Only read by the memory backend
ROSTER = [
    {"employee_id": 1, "full_name": "Admin Demo", "email": "admin@example.com", "role": "admin"},
    {"employee_id": 2, "full_name": "Ayesha Khan", "email": "ayesha@example.com", "role": "staff"},
    {"employee_id": 3, "full_name": "Bilal Ahmed", "email": "bilal@example.com", "role": "staff"},
]
