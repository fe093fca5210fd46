"""
SprintPilot - Sprint Planning and Capacity Service

This package contains the SprintPilot backend:
- planning: Working-day calendar, capacity aggregation, task risk, history metrics
- domain: Team, sprint, holiday and task models
- storage: Key-value persistence (SQLAlchemy, in-memory) and the sprint repository
- engine: Sprint and holiday services orchestrating the planning core
- integrations: Holiday lookup REST client
- ai: Text generation provider, prompt builders, content generator
- api: FastAPI REST endpoints
- platform: Cross-cutting concerns (config, logging)
"""

__version__ = "0.1.0"
