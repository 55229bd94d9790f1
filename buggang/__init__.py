# Bug Gang Scheduler: task tracking with list and board views
#
# Components:
#   schema.py    - Data model (Task, TaskStatus)
#   errors.py    - Error taxonomy
#   store.py     - In-memory task store (authoritative session state)
#   adapter.py   - SQLite persistence adapter
#   events.py    - Write-through sync bridge between store and adapter
#   views.py     - List / board projections
#   gestures.py  - Drag gesture -> status transition
#   seeding.py   - Seed and reset maintenance operations
#   config.py    - YAML configuration
#   server.py    - JSON API (Flask)
#   cli.py       - Command-line entry point

__version__ = "0.1.0"
