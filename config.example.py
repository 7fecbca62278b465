# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/taskbell/config.py.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKBELL_APP_NAME": "App display name (default: taskbell).",
    "TASKBELL_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Console
    "TASKBELL_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    "TASKBELL_CONSOLE_BELL": "Ring the terminal bell on every notification (default: false).",
    # Reminders
    "TASKBELL_PRE_ALERT_SECONDS": "Early warning lead time in seconds (default: 120; 0 disables it).",
    # Paths (gitignored)
    "TASKBELL_DATA_DIR": "Local data directory for the DB and log file (default: .local/taskbell).",
    "TASKBELL_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
}
