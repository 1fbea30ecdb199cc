"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants (conversion factors, public messages)
- exceptions: Custom exception hierarchy
- ingress: HTTP request/response boundary helpers
"""
