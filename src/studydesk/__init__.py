"""Studydesk - personal productivity tracker for students."""

__version__ = "0.1.0"
