"""Filesystem managers for formula namespaces.

Each module provides plain functions that change or index a workspace on
disk and raise domain exceptions (``LookupError``, ``ValueError``) or
``OSError``, never click exceptions -- that translation is the CLI's
responsibility.
"""
