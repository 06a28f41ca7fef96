"""
Domain layer - Core business entities and repository contracts.

This module contains the domain models and repository interfaces,
isolated from external concerns like databases and frameworks.
"""
