"""
Frontend: scanner, words and the substituting command builder.
"""

from .words import Word, WordType
from .scanner import Scanner, split_words, is_complete
