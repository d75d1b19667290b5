"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskDraft, TaskStatus) + column partition
- task_sync.py: in-memory collection kept in step with the remote task API
- outbox.py: ordered delivery / retry / rollback of optimistic mutations
"""
