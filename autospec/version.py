"""autospec version information."""

VERSION = "0.9.0"


def version_string(version: str = VERSION) -> str:
    """Format the version the way generated artifacts record it."""
    return f"autospec {version}"
