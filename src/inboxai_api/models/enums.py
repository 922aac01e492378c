"""
Enumerations for the email domain.
"""

from enum import Enum
from typing import Optional


class EmailCategory(str, Enum):
    """
    Labels the classifier is instructed to choose from.
    
    Classification output is not clamped to this set; ``from_label`` only
    tells callers whether a label is canonical.
    """
    
    WORK = "work"
    PERSONAL = "personal"
    IMPORTANT = "important"
    SPAM = "spam"
    NEWSLETTER = "newsletter"
    SOCIAL = "social"
    OTHER = "other"
    
    @classmethod
    def from_label(cls, label: str) -> Optional["EmailCategory"]:
        """Match a raw model label (case and whitespace insensitive), or None."""
        try:
            return cls(label.strip().lower())
        except ValueError:
            return None
