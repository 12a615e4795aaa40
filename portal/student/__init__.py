"""Student views module.

Provides:
- Dashboard with overall and per-unit progress
- Course view with per-lesson status
- Access-gated lesson detail
"""
