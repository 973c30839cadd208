"""
Utility modules for Infantino.

Cross-cutting concerns:
- Formatting: Locale-aware dates and weekday names
- Messages: User-facing status strings
"""
