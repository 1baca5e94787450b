"""
Application constants and environment-driven configuration.
"""
import os

# Database
DATABASE_URL = os.getenv("FOCUSBOARD_DATABASE_URL", "sqlite:///./focusboard.db")

# Auth
API_KEY = os.getenv("FOCUSBOARD_API_KEY", "your-secret-key-change-me")
CRON_SECRET = os.getenv("FOCUSBOARD_CRON_SECRET")
USER_ID_HEADER = "X-User-Id"
TIMEZONE_HEADER = "X-Timezone"

# Logging
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/focusboard"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"
LOG_DIR = os.getenv("FOCUSBOARD_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("FOCUSBOARD_LOG_FILE", "app.log")

# CORS
CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "FOCUSBOARD_CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")
    if origin.strip()
]

# Scheduler
SCHEDULER_ENABLED = os.getenv("FOCUSBOARD_SCHEDULER_ENABLED", "true").lower() == "true"
NIGHTLY_MAINTENANCE_HOUR = int(os.getenv("FOCUSBOARD_NIGHTLY_HOUR", "3"))

# Calendar
DEFAULT_TIMEZONE = os.getenv("FOCUSBOARD_DEFAULT_TIMEZONE", "America/New_York")

# Goal statuses
GOAL_STATUS_ACTIVE = "active"
GOAL_STATUS_COMPLETED = "completed"

# Goal types (projects share the goals table)
GOAL_TYPE_GOAL = "goal"
GOAL_TYPE_PROJECT = "project"

# Task statuses
TASK_STATUS_COMPLETED = "completed"

# Education item statuses
EDUCATION_STATUS_COMPLETED = "completed"

# Priorities
PRIORITY_PURGE_AFTER_HOURS = 24
SMART_DEDUPE_SIMILARITY = 0.8

# Ledger history
LEDGER_HISTORY_DEFAULT_LIMIT = 100
LEDGER_BREAKDOWN_DAYS = 7

# Ledger entry types for history display
ENTRY_TYPE_GOAL_PROGRESS = "goal_progress"
ENTRY_TYPE_TASK_COMPLETION = "task_completion"
ENTRY_TYPE_OTHER = "other"

# Trophy families
TROPHY_FAMILY_DISCIPLINE = "discipline"
TROPHY_FAMILY_TOTAL_HABIT = "total_habit"
TROPHY_FAMILY_SIGNIN_STREAK = "signin_streak"
