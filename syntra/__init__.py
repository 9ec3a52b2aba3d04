"""Syntra study-session backend."""
