"""
Core utilities shared across the potluck API: configuration, logging
bootstrap, secret checks and the application context.
"""
