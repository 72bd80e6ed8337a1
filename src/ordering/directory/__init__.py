"""User directory abstraction: pluggable lookup of user contact details."""

import os

_directory_instance = None


def get_directory():
    """Return the configured user directory (singleton).

    Uses the identity domain by default. Configure via the
    USER_DIRECTORY_ADAPTER environment variable.
    """
    global _directory_instance
    if _directory_instance is None:
        adapter = os.environ.get("USER_DIRECTORY_ADAPTER", "identity")
        if adapter == "identity":
            from ordering.directory.identity_adapter import IdentityUserDirectory

            _directory_instance = IdentityUserDirectory()
        elif adapter == "fake":
            from ordering.directory.fake_adapter import FakeUserDirectory

            _directory_instance = FakeUserDirectory()
        else:
            raise ValueError(f"Unknown user directory adapter: {adapter}")
    return _directory_instance


def set_directory(directory):
    """Install a specific directory instance (tests use this with a fake)."""
    global _directory_instance
    _directory_instance = directory


def reset_directory():
    """Reset the directory singleton (useful for testing)."""
    global _directory_instance
    _directory_instance = None
