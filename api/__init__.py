"""
Lookup API package.

FastAPI application exposing the violation service.
"""
