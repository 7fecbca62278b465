"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskKind, ReminderMode)
- task_store.py: SQLite-backed storage + validation
- time_model.py: date/time parsing and labels
- weekly.py: next occurrence of a weekly reminder
- timer_registry.py: live timer handles keyed by task id
- reminder_engine.py: arms/cancels/re-arms reminder timers
- task_api.py: store mutations followed by the matching engine call
"""
