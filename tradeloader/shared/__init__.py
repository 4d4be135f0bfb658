"""
Shared module package.

Contains cross-cutting concerns used across layers:
- Logging configuration
- Elapsed-time diagnostics
"""
