"""
FastAPI routers for all API endpoints.

Each module defines a router for one area (health, auth, technicians).
Protected endpoints authenticate from the auth cookie, validate the request
against a declarative schema, then delegate to the service layer.
"""
