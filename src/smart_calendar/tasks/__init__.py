"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, Category, TaskStatus) + JSON codec
- task_storage.py: storage adapters (SQLite key-value, in-memory)
- task_store.py: canonical task collection with write-through persistence
- task_form.py: draft editing and commit validation
- task_views.py: pure projections (filters, calendar month, stats)
- task_api.py: quick progress actions
- task_transfer.py: JSON export / import
"""
