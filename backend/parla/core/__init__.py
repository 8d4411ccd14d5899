# parla/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Builds provider clients and pipeline services once per process
- db: Database configuration and connection management
- errors: Pipeline error taxonomy mapped to HTTP statuses
- security: Authentication and password hashing
"""
