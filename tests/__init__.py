# tests/__init__.py
"""
Test suite for the CRUD scaffold.

Organization:
- `core`: result envelope, filters, logging facade, Dao and service, run
  against an in-memory SQLite database.
- `http_api`: controller and application behaviour through FastAPI's
  TestClient.
"""
