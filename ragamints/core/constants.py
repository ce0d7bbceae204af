"""Project-wide constants."""

SOFTWARE = "ragamints"

# Prefix prepended to every user-facing error message
ERROR_PREFIX = f"{SOFTWARE}: "
