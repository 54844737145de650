"""PLAUDIT

Review intake for a tutoring marketplace. A student leaves one review per
completed booking, and the tutor's rating aggregate (average rating, review
count) is recomputed in the same transaction so it never drifts from the
reviews it summarizes.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
