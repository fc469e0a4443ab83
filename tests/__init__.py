"""
Gatekeep test suite.

This package contains tests for:
- Name derivation
- Policy and scope finding
- Resolver entry points
- Policy base classes, built-ins and the registry
- Configuration and exceptions
"""
