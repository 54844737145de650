"""Outbound ports for PLAUDIT.

Abstract contracts the service layer depends on. Adapters implement them;
nothing here imports from `plaudit.adapters` or `plaudit.entrypoints`.
"""
