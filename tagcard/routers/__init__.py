"""
FastAPI routers grouped by concern (public profile pages, support).

Each module exposes an APIRouter that app.py includes.
"""
