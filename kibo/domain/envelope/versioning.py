"""
API version extraction from request paths.

Able to find the following:
    /path/api/1/something   => 1
    /path/api/V2/something  => 2
    /api/v13/something      => 13
    /something/else/134/    => 0
"""

import re

# Greedy prefix: the last "/api/" segment in the path wins.
API_VERSION_PATTERN = re.compile(r".*/api/[vV]?([0-9]*)/?")


def extract_version(path: str) -> int:
    """Parse the API version from a request path.

    Args:
        path: The effective request path.

    Returns:
        The version number, or 0 when the path has no "/api/" segment
        or the segment carries no digits.
    """
    match = API_VERSION_PATTERN.search(path)
    if match is None:
        return 0
    digits = match.group(1)
    if not digits:
        return 0
    return int(digits, 10)
