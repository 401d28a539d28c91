"""
Vanity URL handling for the client.
"""

from shared.errors import InvalidArgumentError

PROFILE_MARKER = "/id/"


def extract_vanity_token(value: str) -> str:
    """Pull the vanity token out of a profile URL, or return a bare token as is.

    ``https://steamcommunity.com/id/ac89/`` and ``ac89`` both give ``ac89``.
    Input that looks like a URL but has no ``/id/`` segment is returned
    unchanged and left for Steam to reject.
    """
    if value is None or not value.strip():
        raise InvalidArgumentError("Vanity URL cannot be null or empty")

    if "/" not in value and "." not in value:
        return value

    start = value.find(PROFILE_MARKER)
    if start == -1:
        return value

    start += len(PROFILE_MARKER)
    end = value.find("/", start)
    token = value[start:] if end == -1 else value[start:end]

    # "/id/" with nothing after it
    if not token.strip():
        return value
    return token
