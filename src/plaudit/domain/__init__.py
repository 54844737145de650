"""Domain layer for PLAUDIT.

Contains the business vocabulary: bookings as seen by the review workflow,
reviews, the tutor rating aggregate and the error taxonomy. This package is
deliberately technology-agnostic.

Dependency rule: do not import from `plaudit.adapters` or `plaudit.entrypoints`.
"""
