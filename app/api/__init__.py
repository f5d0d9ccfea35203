"""
API module - FastAPI routers, access policies and error handlers.

Usage:
    from app.api.routes import api_router
    app.include_router(api_router, prefix="/api")
"""
