"""
Event term parser for DATAMON.

Provides lexical analysis, parsing, and term construction for the event
terms (``acquire(1, 10)``) that make up replayed trace files.
"""
