"""
Account service package.

This package provides a FastAPI application exposing a GraphQL API for
account registration, login and current-user lookup, with argon2 password
hashing, signed session cookies and a SQLAlchemy-backed account store.
"""
