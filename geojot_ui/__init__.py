"""Headless view models for the GeoJot client.

Each view model holds the state one screen of the web client renders
(messages, labels, counts, lists) and exposes that screen's user
actions as methods.  They share an injected :class:`AppState`.
"""

from .store import AppState, PinStore, SelectionChannel, UserStore

__all__ = ["AppState", "PinStore", "SelectionChannel", "UserStore"]
