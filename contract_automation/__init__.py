"""Template-driven contract generation and dispatch"""

__version__ = "0.1.0"
