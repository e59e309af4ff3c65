"""
Language-specific code generators.

This module contains generators for different target languages.
"""

from .go import GoGenerator, create_go_generator

__all__ = ["GoGenerator", "create_go_generator"]
