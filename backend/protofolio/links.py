"""
Protofolio — External Link Helpers
====================================

What:  The link-validity rule and the embed-URL transform for prototype links.
Why:   Both the server (before persisting) and the catalog controller (before
       submitting, and when rendering previews) need the exact same rules.
How:   Pure string checks; no URL parsing, no network access.

Recognized shapes:
    https://www.figma.com/proto/<key>/<name>   → prototype view
    https://www.figma.com/file/<key>/<name>    → file view
"""

HOST_MARKER = "figma.com"
PROTOTYPE_PATH_MARKER = "/proto/"
FILE_PATH_MARKER = "/file/"
PATH_MARKERS = (PROTOTYPE_PATH_MARKER, FILE_PATH_MARKER)

EMBED_PATH_MARKER = "/embed?embed_host=share&url="
EMBED_QUERY_SUFFIX = "&chrome=DOCUMENTATION"


def is_valid_external_url(url: str) -> bool:
    """True if `url` names the recognized host and one of the two path markers."""
    if not url:
        return False
    return HOST_MARKER in url and any(marker in url for marker in PATH_MARKERS)


def to_embed_url(url: str) -> str:
    """
    Derive an embeddable viewer URL from a stored link.

    The first path marker found is swapped for the embed marker and the viewer
    query parameters are appended. Unrecognized shapes pass through unchanged.

    >>> to_embed_url("https://www.figma.com/proto/abc/Demo")
    'https://www.figma.com/embed?embed_host=share&url=abc/Demo&chrome=DOCUMENTATION'
    """
    for marker in PATH_MARKERS:
        if marker in url:
            return url.replace(marker, EMBED_PATH_MARKER, 1) + EMBED_QUERY_SUFFIX
    return url
