"""
Authentication core for cloud-auth.

This package provides:
- Password hashing and verification
- JWT token issuance and validation
- User registration and login
- Bearer token middleware for protected routes
"""
