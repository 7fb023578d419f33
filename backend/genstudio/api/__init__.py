"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (export excepted: ZIP bytes)

Design Decisions:
    - Thin routes delegate to the session controller (ADR: impureim sandwich)
"""
