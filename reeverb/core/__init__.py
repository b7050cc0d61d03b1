"""
Core utilities shared across the Reeverb API.

- configuration (Settings, load_settings)
- error taxonomy and its HTTP conversion
- password hashing and bearer token verification
- logging setup
"""
