"""
Core Pipeline Components

Stage functions of the phenotype -> GO pathway -> gene pipeline plus the
supporting configuration, error and retry layers.
"""

from .annotation_loader import load_ontology, load_annotations, TermCatalog, AnnotationSet
from .keyword_matcher import match_keyword
from .graph_expander import expand_terms, ExpansionResult
from .pathway_partitioner import partition_pathways, PathwayPartition
from .gene_resolver import load_cross_reference, resolve_genes, CrossReference
from .association_stats import associations_to_frame, deduplicate_associations, pathway_summary
from .config import Config

__all__ = [
    'load_ontology',
    'load_annotations',
    'TermCatalog',
    'AnnotationSet',
    'match_keyword',
    'expand_terms',
    'ExpansionResult',
    'partition_pathways',
    'PathwayPartition',
    'load_cross_reference',
    'resolve_genes',
    'CrossReference',
    'associations_to_frame',
    'deduplicate_associations',
    'pathway_summary',
    'Config',
]
