"""
Utilities for DATAMON: monitor logging and trace file reading.
"""
