"""
StudyFlow - heuristic study question generation.
"""

__version__ = "0.1.0"
