"""
PhenoGO Visualization Suite

Static (PNG, PDF, SVG) and interactive (HTML) report figures.

Usage:
    from phenogo.visualization import ReportVisualizer

    ReportVisualizer().visualize(graph, roots, table, chromosome_annotation, 'results/figures')
"""

from .base import BaseVisualizer
from .chromosome_map import ChromosomeMapVisualizer
from .orchestrator import ReportVisualizer
from .pathway_overlap import PathwayOverlapVisualizer
from .table_view import AssociationTableVisualizer
from .term_graph import TermGraphVisualizer

__all__ = [
    'BaseVisualizer',
    'ChromosomeMapVisualizer',
    'PathwayOverlapVisualizer',
    'AssociationTableVisualizer',
    'TermGraphVisualizer',
    'ReportVisualizer',
]
