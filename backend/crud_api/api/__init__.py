"""API Layer: FastAPI routes, middleware and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses
"""
