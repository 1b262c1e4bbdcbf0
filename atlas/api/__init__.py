"""HTTP surface: FastAPI routes, request schemas and middleware."""
