"""
Cross-cutting pieces: settings, logging setup, circuit breakers, payload schemas.
"""
