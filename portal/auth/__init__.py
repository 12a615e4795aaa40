"""Student authentication module.

Provides:
- Registration with initial progress records
- Login with JWT access tokens
- Password change
"""
