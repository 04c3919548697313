"""Infrastructure modules for the locale resolution engine.

Centralized infrastructure components:
- i18n: Language matching, translation loading and message rendering
"""
