"""
taskbell: a local to-do list with two-stage reminder notifications.

Packages:
- tasks/: task model, SQLite store, time helpers and the reminder engine
- core/: ports (Protocols) and application state
- connectors/: console REPL and console notifier
- cli/: entry point, composition root and slash commands
"""
