"""API Layer — FastAPI routes, request-to-session mapping, response rendering.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes only parse input and delegate to SiteController
"""
