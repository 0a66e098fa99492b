"""
Utilities shared by the *transflux* stages.
"""

from ._validation import *
