"""Stable failure codes for fetch and parse operations.

Used by: joke_fetch, recommend, session logging.
"""

FETCH_TIMEOUT = "FETCH_TIMEOUT"
FETCH_TRANSIENT = "FETCH_TRANSIENT"
RATE_LIMITED = "RATE_LIMITED"
FETCH_PERMANENT = "FETCH_PERMANENT"
PARSE_ERROR = "PARSE_ERROR"
NOT_FOUND = "NOT_FOUND"            # JokeAPI answered {"error": true}
