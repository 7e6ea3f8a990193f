"""
Pydantic schema definitions for API payloads.

Each domain (users, posts, volunteer registrations) defines its own
Pydantic models for request bodies.  Field names follow the camelCase
keys stored in MongoDB and used by the web client.
"""
