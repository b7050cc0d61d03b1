"""
High-level use cases for the Reeverb API.

Routers call these services; services resolve identifiers, check ownership
and uniqueness, and talk to SQLRepository. They never build HTTP responses.
"""
