"""
UI service - handles user interface components and interactions.
"""

from .composer import Composer, ComposerState

__all__ = [
    'Composer',
    'ComposerState'
]
