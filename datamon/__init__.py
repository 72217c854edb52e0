"""
DATAMON: data automata runtime verification.

Checks streams of events against specifications combining state
machines over data-carrying states, temporal operators (always, hot,
next, until, during, ...) and rule-style queries over active facts.
"""

__version__ = "0.1.0"
