import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost/api"),
    "token": os.getenv("API_TOKEN", ""),
    "timeout_seconds": float(os.getenv("API_TIMEOUT_SECONDS", "10")),
}

# Re-fetch interval for open attendance boards (0 disables polling)
POLL_INTERVAL_SECONDS = float(os.getenv("POLL_INTERVAL_SECONDS", "15"))

# Role name used to pick students out of the accounts directory
STUDENT_ROLE = os.getenv("STUDENT_ROLE", "Student")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True
