"""
API routes package for the draft room application.

Contains all API endpoints organized by functionality.
"""
