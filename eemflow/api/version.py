"""Canonical API version constant.

Kept in its own module so routes can import it without pulling in the
application factory.
"""

API_VERSION = "0.1.0"
