"""
Domain Layer

Architectural Intent:
- Pure release model, value objects, events and port contracts
- No infrastructure imports
"""
