"""
PhenoGO CLI

Command line entry points (``phenogo run`` and ``phenogo verify``).
"""

from .main import main
from .validators import CLIValidator

__all__ = ['main', 'CLIValidator']
