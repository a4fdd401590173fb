"""Auth Session Client.

Client library and command-line tool for creating, reading and
impersonating sessions on an auth service over its HTTP + JSON API.
"""

__version__ = "0.1.0"
