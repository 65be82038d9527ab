"""
Cloud authentication backend.

Registration, login and bearer-token protected routes, served from a
single serverless function backed by a key-value user table.
"""
