"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TodosState) + slot wire format
- task_store.py: in-memory store, mutations and derived views
- persistence.py: load/save of the whole store state through one storage slot
- task_input.py: normalization of raw user input before it reaches the store
"""
