"""
Prompt versioning and diff modules.
"""

from .version_control import INITIAL_CONTENT, PromptRepository
from .diff_engine import DiffEngine, DiffTag, split_lines

__all__ = ["INITIAL_CONTENT", "PromptRepository", "DiffEngine", "DiffTag", "split_lines"]
