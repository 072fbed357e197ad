"""
Core Module - the task manager's domain.

- models: account and task models
- services: authentication and owner-scoped task access
- api: HTTP routes over the services
"""
