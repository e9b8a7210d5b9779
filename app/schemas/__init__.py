"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: Internal data structures (service results, auth outcomes)
- Schemas: API contract (what client sends/receives)
"""
