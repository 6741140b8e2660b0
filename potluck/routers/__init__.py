"""
FastAPI routers.

Each module exposes an APIRouter included by potluck.app.create_app.
"""
