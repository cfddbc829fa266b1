"""
Scripts Package.

This package contains operational scripts for the lookup service.

Scripts:
- bootstrap_db: Database initialization and demo data
"""

# Scripts are meant to be run directly, not imported
