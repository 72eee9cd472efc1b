"""
Pydantic schema definitions for API payloads.

Field names are snake_case in Python and camelCase on the wire (via
aliases) so the JSON matches what the web client already consumes.
"""
