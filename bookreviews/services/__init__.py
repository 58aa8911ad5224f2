"""
Services Package

Business logic kept separate from HTTP handling so it can be reused and
tested against a plain database session.

Current services:
- exceptions.py: Domain errors raised by the services
- reviews.py: Review lifecycle (create, update, soft delete, listings)
- interactions.py: Likes and comments on reviews
- stats.py: Rating aggregates and per-user reading statistics
- responses.py: Response assembly for the API layer
- security.py: JWT access token verification
"""
