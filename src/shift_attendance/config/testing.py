SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"
DB_CONFIG = None

UTC_OFFSET_MINUTES = 300
WEEK_START = 0
BREAK_POLICY = "paid"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

ROSTER = [
    {"employee_id": 1, "full_name": "Admin Demo", "email": "admin@example.com", "role": "admin"},
    {"employee_id": 2, "full_name": "Ayesha Khan", "email": "ayesha@example.com", "role": "staff"},
    {"employee_id": 3, "full_name": "Bilal Ahmed", "email": "bilal@example.com", "role": "staff"},
    {"employee_id": 4, "full_name": "Sara Malik", "email": "sara@example.com", "role": "staff"},
    {"employee_id": 5, "full_name": "Usman Tariq", "email": "usman@example.com", "role": "staff", "is_active": False},
]
