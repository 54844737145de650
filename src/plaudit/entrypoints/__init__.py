"""Entrypoints: the review submission envelope and the ``plaudit`` CLI.

Entrypoints talk to the application through `plaudit.bootstrap` and the
service layer's public functions only.
"""
