"""
High-level use cases for the potluck API.

Routers call these services instead of touching storage backends directly.
"""
