"""
HTTP routes.

``router`` aggregates one sub‑router per domain and is mounted under
``/api`` by ``main.create_app``.
"""
