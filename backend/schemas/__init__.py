"""
Pydantic schemas for API responses and declarative request schemas.

Response models serialize with camelCase aliases. Request bodies, queries
and path params are described as RequestSchema data (see backend.validation)
and checked before a handler runs.
"""
