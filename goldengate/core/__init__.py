"""Core utilities and shared application primitives.

Modules in this package hold configuration, sessions, identity,
validation, rate limiting and other small helpers shared by the routes.
"""
