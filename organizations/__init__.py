"""
Organizations module - operator hierarchy and access scoping.

This module handles:
- Organization entity (TOP, UNIT, RESELLER)
- Org hierarchy resolution for authorization scoping
- Organization repository (port)
- Organization infrastructure (Django ORM adapters, API keys)
"""
