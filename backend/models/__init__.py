"""
Models - domain dataclasses and API (pydantic) schemas

- models.domain: storage-agnostic entities used by services and repositories
- models.api: request/response models used by the FastAPI routers
"""
