"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: profile categories and their field declarations
- Schemas: API contract (what client sends/receives)
"""
