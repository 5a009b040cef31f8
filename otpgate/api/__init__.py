"""
API package.

FastAPI application, routes, request/response models and
exception handlers for the registration endpoints.
"""
