"""
Chromosome Map Visualizer

Interactive genome-position map built from the chromosome annotation file:
one row per chromosome, one marker per located gene, coloured by GO term.
"""

import logging
import re
from pathlib import Path
from typing import List

import pandas as pd
import plotly.graph_objects as go

from .base import BaseVisualizer
from .styles import VisualizationStyles

logger = logging.getLogger(__name__)


def chromosome_sort_key(label: str):
    """Natural order: 1, 2, ..., 10, then X, Y, Mt, Pt."""
    match = re.match(r'^(\d+)', str(label))
    if match:
        return (0, int(match.group(1)), str(label))
    return (1, 0, str(label))


class ChromosomeMapVisualizer(BaseVisualizer):
    """Genome positions of the located genes."""

    def visualize(self, annotation: pd.DataFrame, output_dir, title: str = "") -> List[Path]:
        output_path = self.create_output_dir(output_dir)
        fig = self.plot(annotation, title)
        return [self.save_html(fig, output_path, 'chromosome_map')]

    def plot(self, annotation: pd.DataFrame, title: str = "") -> go.Figure:
        """
        Args:
            annotation: Columns name, chromosome, start, stop, term_id
            title: Figure title suffix
        """
        fig = go.Figure()
        title = f"Chromosome map {title}".strip()

        if annotation.empty:
            fig.add_annotation(text="No gene with a known location", showarrow=False,
                               x=0.5, y=0.5, xref='paper', yref='paper', font=dict(size=16))
            fig.update_layout(title=dict(text=f'<b>{title}</b>', x=0.5), template='plotly_white')
            return fig

        data = annotation.copy()
        data['chromosome'] = data['chromosome'].astype(str)
        data['start'] = pd.to_numeric(data['start'])
        data['stop'] = pd.to_numeric(data['stop'])
        data['position_mb'] = (data['start'] + data['stop']) / 2 / 1e6

        chromosomes = sorted(data['chromosome'].unique(), key=chromosome_sort_key)

        # Backbone spans to the furthest gene on each chromosome
        extents = data.groupby('chromosome')['stop'].max() / 1e6
        backbone_x, backbone_y = [], []
        for chrom in chromosomes:
            backbone_x.extend([0, extents[chrom], None])
            backbone_y.extend([chrom, chrom, None])
        fig.add_trace(go.Scatter(
            x=backbone_x, y=backbone_y, mode='lines',
            line=dict(color=VisualizationStyles.get_color('chromosome', 'backbone'), width=8),
            hoverinfo='none', showlegend=False
        ))

        palette = VisualizationStyles.get_palette('chromosome')
        for i, (term_id, group) in enumerate(data.groupby('term_id', sort=True)):
            hovertexts = [
                f"<b>{row.name}</b><br>Chr {row.chromosome}: {int(row.start):,}-{int(row.stop):,}<br>{term_id}"
                for row in group.itertuples(index=False)
            ]
            fig.add_trace(go.Scatter(
                x=group['position_mb'], y=group['chromosome'], mode='markers',
                marker=dict(size=11, color=palette[i % len(palette)], symbol='line-ns-open',
                            line=dict(width=3)),
                hovertext=hovertexts, hoverinfo='text', name=term_id
            ))

        fig.update_layout(
            title=dict(text=f'<b>{title}</b>', font=dict(size=16), x=0.5),
            xaxis=dict(title='Position (Mb)', rangemode='tozero'),
            yaxis=dict(title='Chromosome', categoryorder='array', categoryarray=chromosomes[::-1]),
            template='plotly_white',
            height=max(400, 80 * len(chromosomes) + 200), width=1100,
            legend=dict(title='GO term')
        )
        logger.debug(f"Chromosome map with {len(data)} genes on {len(chromosomes)} chromosomes")
        return fig
