"""Core of the client: configuration, errors, models and services.

Why:
- Nothing here knows about the CLI; HTTP lives behind `HsdsClient`.
"""
