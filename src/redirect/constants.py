"""HTTP constants for the redirect layer.

Centralizes status codes, header names, and defaults shared across modules.
"""

# Redirect status codes
HTTP_STATUS_MOVED_PERMANENTLY = 301
HTTP_STATUS_FOUND = 302
HTTP_STATUS_SEE_OTHER = 303
HTTP_STATUS_TEMPORARY_REDIRECT = 307

REDIRECT_STATUS_CODES = frozenset(
    {
        HTTP_STATUS_MOVED_PERMANENTLY,
        HTTP_STATUS_FOUND,
        HTTP_STATUS_SEE_OTHER,
        HTTP_STATUS_TEMPORARY_REDIRECT,
    }
)

# Header names
HEADER_LOCATION = "Location"
HEADER_AUTHORIZATION = "Authorization"
DEFAULT_RESPONSE_COOKIE_HEADER = "Cookies"
DEFAULT_REQUEST_COOKIE_HEADER = "Cookie"

# Headers describing a request body; dropped along with the body
BODY_HEADERS = frozenset({"content-type", "content-length", "transfer-encoding"})

# Loop limits
DEFAULT_REDIRECT_LIMIT = 3

# Cookie string separators
COOKIE_PAIR_SEPARATOR = ";"
COOKIE_JOIN_SEPARATOR = "; "
