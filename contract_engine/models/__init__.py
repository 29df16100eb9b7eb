"""
API request/response schemas.

Serialized with camelCase keys to match the stored item attributes.
"""
