"""
Interactive HTML view of the association table.
"""

import logging
from pathlib import Path
from typing import List

import pandas as pd
import plotly.graph_objects as go

from .base import BaseVisualizer

logger = logging.getLogger(__name__)

SEQUENCE_PREVIEW = 30


class AssociationTableVisualizer(BaseVisualizer):
    """Plotly table of the joined association table."""

    def visualize(self, table: pd.DataFrame, output_dir, title: str = "") -> List[Path]:
        output_path = self.create_output_dir(output_dir)
        fig = self.plot(table, title)
        return [self.save_html(fig, output_path, 'association_table')]

    def plot(self, table: pd.DataFrame, title: str = "") -> go.Figure:
        data = table.astype(object).where(table.notna(), '')
        if 'sequence' in data.columns:
            data['sequence'] = data['sequence'].map(
                lambda s: s[:SEQUENCE_PREVIEW] + '...' if isinstance(s, str) and len(s) > SEQUENCE_PREVIEW else s
            )

        fig = go.Figure(data=[go.Table(
            header=dict(values=[f'<b>{c}</b>' for c in data.columns],
                        fill_color='#4E79A7', font=dict(color='white', size=12), align='left'),
            cells=dict(values=[data[c].tolist() for c in data.columns],
                       fill_color='#F5F5F5', align='left', font=dict(size=11))
        )])
        fig.update_layout(
            title=dict(text=f"<b>{f'Gene associations {title}'.strip()}</b>", x=0.5),
            template='plotly_white',
            height=min(2000, 300 + 25 * len(data)),
        )
        return fig
