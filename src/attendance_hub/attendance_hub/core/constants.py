"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ONLINE_WINDOW_MINUTES = 5
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_POLL_INTERVAL_SECONDS = 15
MAX_OPEN_BOARDS = 8
ALL_BRANCHES = "All"
UNMARKED_PLACEHOLDER = "-"
UNKNOWN_PERSON_NAME = "Unknown Student"
DEFAULT_STUDENT_ROLE = "Student"
DEFAULT_OPERATOR_NAME = "Staff"
DEFAULT_OPERATOR_ROLE = "Staff"

# Backend endpoints, relative to API_BASE_URL.
STUDENTS_PATH = "/students"
ACCOUNTS_PATH = "/accounts"
ATTENDANCE_PATH = "/attendance"
BRANCHES_PATH = "/branches"
