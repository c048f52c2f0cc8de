"""Redirect graph maintenance and build session."""
