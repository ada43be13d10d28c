"""
lexigraph - spaced-repetition back end for the vocabulary graph.
"""

__version__ = "0.1.0"
