"""
Data Models

Pydantic models for pipeline data structures.
"""

from .data_models import (
    TermCategory, Term, Pathway, GeneRecord,
    GeneAssociation, FetchStatus, RunSummary
)

__all__ = [
    'TermCategory', 'Term', 'Pathway', 'GeneRecord',
    'GeneAssociation', 'FetchStatus', 'RunSummary'
]
