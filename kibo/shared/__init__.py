"""
Shared module package.

Contains cross-cutting concerns used across layers:
- Last-resort error handling
- Logging configuration
"""
