"""
Task subsystem.

Components:
- task_models.py: data structures (Identity, Task, EditState)
- task_list.py: in-memory ordered task list reconciled against the remote task table
"""
