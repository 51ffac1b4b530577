import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost/api"),
    "token": os.getenv("API_TOKEN", ""),
    "timeout_seconds": float(os.getenv("API_TIMEOUT_SECONDS", "10")),
}

POLL_INTERVAL_SECONDS = float(os.getenv("POLL_INTERVAL_SECONDS", "15"))

STUDENT_ROLE = os.getenv("STUDENT_ROLE", "Student")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEBUG = False
