"""
Visualization Orchestrator

Renders every report figure for one run. A figure that fails is logged and
skipped; the table and checksum are already on disk by the time figures are
drawn, so a plotting problem never costs the run its results.
"""

import logging
from pathlib import Path
from typing import Iterable, List

import networkx as nx
import pandas as pd

from .chromosome_map import ChromosomeMapVisualizer
from .pathway_overlap import PathwayOverlapVisualizer
from .table_view import AssociationTableVisualizer
from .term_graph import TermGraphVisualizer
from ..core.association_stats import gene_sets_by_pathway, pathway_summary

logger = logging.getLogger(__name__)


class ReportVisualizer:
    """
    Orchestrates figure generation for a pipeline run.

    Produces:
    - term_graph.png (+ term_graph_interactive.html)
    - pathway_overlap_venn.png and pathway_gene_counts.png
    - chromosome_map.html
    - association_table.html
    """

    def __init__(self, style: str = 'publication'):
        self.style = style
        self.term_graph = TermGraphVisualizer(style)
        self.pathway_overlap = PathwayOverlapVisualizer(style)
        self.chromosome_map = ChromosomeMapVisualizer(style)
        self.table_view = AssociationTableVisualizer(style)
        logger.info(f"Initialized ReportVisualizer with style: {style}")

    def visualize(
        self,
        graph: nx.DiGraph,
        roots: Iterable[str],
        table: pd.DataFrame,
        chromosome_annotation: pd.DataFrame,
        output_dir,
        keyword: str = "",
        interactive: bool = True,
        formats: List[str] = ['png']
    ) -> List[Path]:
        """
        Generate all figures.

        Args:
            graph: Expanded term graph
            roots: Pathway root term ids
            table: Association table (before deduplication)
            chromosome_annotation: name/chromosome/start/stop/term_id rows
            output_dir: Directory for the figures
            keyword: Phenotype keyword, used in titles
            interactive: Also write the interactive HTML views
            formats: Output formats for static figures

        Returns:
            Paths of the files written
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        generated_files: List[Path] = []
        roots = set(roots)
        title = f"for '{keyword}'" if keyword else ""

        # 1. Term graph
        try:
            generated_files.extend(self.term_graph.visualize(
                graph, roots, output_path, keyword=keyword, interactive=interactive, formats=formats
            ))
        except Exception as e:
            logger.error(f"Failed to generate term graph: {e}")

        # 2. Pathway overlap
        try:
            generated_files.extend(self.pathway_overlap.visualize(
                gene_sets_by_pathway(table), pathway_summary(table), output_path, formats=formats
            ))
        except Exception as e:
            logger.error(f"Failed to generate pathway overlap figures: {e}")

        if interactive:
            # 3. Chromosome map
            try:
                generated_files.extend(self.chromosome_map.visualize(chromosome_annotation, output_path, title))
            except Exception as e:
                logger.error(f"Failed to generate chromosome map: {e}")

            # 4. Interactive table
            try:
                generated_files.extend(self.table_view.visualize(table, output_path, title))
            except Exception as e:
                logger.error(f"Failed to generate interactive table: {e}")

        logger.info(f"Generated {len(generated_files)} figure files in {output_path}")
        return generated_files
