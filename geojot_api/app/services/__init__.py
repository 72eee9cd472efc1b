"""
Business logic services.

Each service groups the operations of one domain (users, pins, media,
music search) as async classmethods over the SQLite database.  Services
raise the exceptions from ``errors``; endpoints translate them into
HTTP responses.
"""
