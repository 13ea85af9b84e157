"""Backend API modules for file-explorer.

Each module provides:
- router.py: FastAPI router with endpoints
- service.py: Business logic
- schemas.py / model.py: Pydantic models and domain types
"""
