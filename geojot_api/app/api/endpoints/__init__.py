"""Domain routers: auth, users, pins, media and music search."""
