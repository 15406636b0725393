"""
Pathway Overlap Visualizer

Generates:
- Venn diagram of the gene-name sets of the largest pathways
- Bar chart of unique genes per pathway
"""

import logging
from pathlib import Path
from typing import Dict, List, Set, Tuple

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib_venn import venn2, venn3

from .base import BaseVisualizer
from .styles import VisualizationStyles

logger = logging.getLogger(__name__)

MAX_VENN_SETS = 3


def select_venn_sets(gene_sets: Dict[str, Set[str]]) -> List[Tuple[str, Set[str]]]:
    """
    The (at most three) largest non-empty sets, largest first.

    Ties are broken on the pathway key so the choice is stable between runs.
    """
    non_empty = [(key, genes) for key, genes in gene_sets.items() if genes]
    non_empty.sort(key=lambda item: (-len(item[1]), item[0]))
    return non_empty[:MAX_VENN_SETS]


class PathwayOverlapVisualizer(BaseVisualizer):
    """Overlap between the gene sets of the pathways."""

    def visualize(
        self,
        gene_sets: Dict[str, Set[str]],
        summary: pd.DataFrame,
        output_dir,
        formats: List[str] = ['png']
    ) -> List[Path]:
        output_path = self.create_output_dir(output_dir)
        generated = []

        fig = self.plot_venn(gene_sets)
        generated.extend(self.save_figure(fig, output_path, 'pathway_overlap_venn', formats))

        fig = self.plot_gene_counts(summary)
        generated.extend(self.save_figure(fig, output_path, 'pathway_gene_counts', formats))

        return generated

    def plot_venn(self, gene_sets: Dict[str, Set[str]]) -> plt.Figure:
        """Venn diagram; fewer than two non-empty sets gives a placeholder."""
        selected = select_venn_sets(gene_sets)
        if len(selected) < 2:
            return self.placeholder_figure(
                'Fewer than two pathways with genes;\nno overlap to show', 'Pathway Gene Overlap'
            )

        fig, ax = plt.subplots(figsize=VisualizationStyles.get_figure_size('venn'))
        labels = tuple(f"{key}\n({len(genes)} genes)" for key, genes in selected)
        sets = tuple(genes for _, genes in selected)
        colors = VisualizationStyles.get_palette('venn')

        if len(selected) == 2:
            venn = venn2(subsets=sets, set_labels=labels, set_colors=colors[:2], alpha=0.6, ax=ax)
        else:
            venn = venn3(subsets=sets, set_labels=labels, set_colors=colors[:3], alpha=0.6, ax=ax)

        for label in venn.set_labels:
            if label:
                label.set_fontsize(12)
                label.set_fontweight('bold')
        for label in venn.subset_labels:
            if label:
                label.set_fontsize(11)

        skipped = len([g for g in gene_sets.values() if g]) - len(selected)
        title = 'Pathway Gene Overlap'
        if skipped > 0:
            title += f'\n(largest {len(selected)} pathways; {skipped} more not shown)'
        ax.set_title(title, fontsize=16, fontweight='bold', pad=20)
        plt.tight_layout()
        return fig

    def plot_gene_counts(self, summary: pd.DataFrame) -> plt.Figure:
        """Horizontal bar chart of unique genes per pathway."""
        if summary.empty:
            return self.placeholder_figure('No pathways', 'Genes per Pathway')

        data = summary.head(30)
        height = max(4, 0.35 * len(data) + 1.5)
        fig, ax = plt.subplots(figsize=(10, height))
        sns.barplot(data=data, x='n_genes', y='pathway_key', ax=ax,
                    color=VisualizationStyles.get_color('term_graph', 'seed'))
        ax.set_xlabel('Unique genes')
        ax.set_ylabel('Pathway')
        ax.set_title('Genes per Pathway', fontsize=14, fontweight='bold')
        plt.tight_layout()
        return fig
