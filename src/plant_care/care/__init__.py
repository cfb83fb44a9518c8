"""
Care subsystem.

Components:
- care_models.py: data structures (Plant, CareInstructions, CareTask, TaskType)
- frequency.py: free-text care frequency -> interval in days
- overdue.py: read-time overdue evaluation + task buckets for presentation
- task_store.py / plant_store.py: collections over an injected storage backend
- task_generator.py: initial care tasks from a plant's care instructions
- lifecycle.py: task completion (task update + plant care-date update)
- care_api.py: small high-level helpers used by the rest of the app
"""
