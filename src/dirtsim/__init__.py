"""
DIRT inference rule discovery: distributional similarity of predicate
templates mined from dependency-parsed biarcs, as a chain of mrjob stages.
"""

__version__ = "1.0"
