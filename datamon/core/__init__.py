"""
Core monitoring engine for DATAMON.

Contains states and the temporal operators, the partitioned state soup,
fact queries, violations, configuration, and the monitor itself.
"""
