"""Reeverb API: projects, testimonials and tags behind bearer-token auth."""

__version__ = "0.1.0"
