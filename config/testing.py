import os

SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://backend.test/api"),
    "token": "",
    "timeout_seconds": 2.0,
}

# Tests drive refreshes explicitly
POLL_INTERVAL_SECONDS = 0

STUDENT_ROLE = "Student"

LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True
