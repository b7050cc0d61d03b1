"""
FastAPI routers grouped by domain (auth, projects, testimonials, tags).

Each module exposes an APIRouter that app.py mounts under /api/v1. Routers
authenticate the caller, hand off to a service from app.state and shape the
response; they hold no business rules.
"""
