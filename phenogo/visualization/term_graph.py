"""
Term Graph Visualizer

Node-link plot of the expanded term graph. Pathway roots are drawn larger and
in their own colour; seed (keyword) terms, recovered terms and terms without
gene annotation are distinguished by colour.
"""

import logging
from pathlib import Path
from typing import Dict, List, Tuple

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import networkx as nx
import plotly.graph_objects as go

from .base import BaseVisualizer
from .styles import VisualizationStyles

logger = logging.getLogger(__name__)

NODE_TYPES = ['root', 'seed', 'recovered', 'unannotated']

NODE_LABELS = {
    'root': 'Pathway roots',
    'seed': 'Keyword matches',
    'recovered': 'Recovered by expansion',
    'unannotated': 'No gene annotation',
}


def node_type(graph: nx.DiGraph, node: str, roots) -> str:
    """Drawing category of one node; roots take precedence."""
    if node in roots:
        return 'root'
    if not graph.nodes[node].get('annotated', True):
        return 'unannotated'
    if graph.nodes[node].get('seed', False):
        return 'seed'
    return 'recovered'


def graph_layout(graph: nx.DiGraph) -> Dict[str, Tuple[float, float]]:
    if graph.number_of_nodes() <= 2:
        return nx.circular_layout(graph)
    return nx.kamada_kawai_layout(graph, scale=2)


class TermGraphVisualizer(BaseVisualizer):
    """Static and interactive plots of the expanded term graph."""

    def visualize(
        self,
        graph: nx.DiGraph,
        roots,
        output_dir,
        keyword: str = "",
        interactive: bool = True,
        formats: List[str] = ['png']
    ) -> List[Path]:
        output_path = self.create_output_dir(output_dir)
        generated = []

        fig = self.plot_static(graph, set(roots), keyword)
        generated.extend(self.save_figure(fig, output_path, 'term_graph', formats))

        if interactive and graph.number_of_nodes():
            html = self.plot_interactive(graph, set(roots), keyword)
            generated.append(self.save_html(html, output_path, 'term_graph_interactive'))

        return generated

    def plot_static(self, graph: nx.DiGraph, roots, keyword: str = "") -> plt.Figure:
        """Draw the graph with matplotlib."""
        title = f"Expanded GO terms for '{keyword}'" if keyword else "Expanded GO terms"
        if graph.number_of_nodes() == 0:
            return self.placeholder_figure('No terms matched', title)

        style = VisualizationStyles.get_network_style()
        fig, ax = plt.subplots(figsize=VisualizationStyles.get_figure_size('network'))
        pos = graph_layout(graph)

        is_a = [(u, v) for u, v, rel in graph.edges(data='relation') if rel in (None, 'is_a')]
        other = [(u, v) for u, v, rel in graph.edges(data='relation') if rel not in (None, 'is_a')]
        for edges, color, line_style in [
            (is_a, VisualizationStyles.get_color('term_graph', 'edge_is_a'), '-'),
            (other, VisualizationStyles.get_color('term_graph', 'edge_other'), '--'),
        ]:
            if edges:
                nx.draw_networkx_edges(
                    graph, pos, edgelist=edges, edge_color=color, style=line_style,
                    width=style['width'], alpha=0.6, ax=ax, arrows=True, arrowsize=10
                )

        for ntype in NODE_TYPES:
            nodes = [n for n in graph.nodes if node_type(graph, n, roots) == ntype]
            if not nodes:
                continue
            size = style['node_size'] * (style['root_size_factor'] if ntype == 'root' else 1)
            nx.draw_networkx_nodes(
                graph, pos, nodelist=nodes,
                node_color=VisualizationStyles.get_color('term_graph', ntype),
                node_size=size, alpha=style['alpha'], ax=ax,
                edgecolors='white', linewidths=style['linewidths']
            )

        if graph.number_of_nodes() <= style['max_labels']:
            label_pos = {k: (v[0], v[1] + 0.08) for k, v in pos.items()}
            nx.draw_networkx_labels(graph, label_pos, font_size=style['font_size'], ax=ax)
        else:
            root_labels = {n: n for n in graph.nodes if n in roots}
            nx.draw_networkx_labels(graph, pos, labels=root_labels, font_size=style['font_size'],
                                    font_weight='bold', ax=ax)

        legend_elements = [
            mpatches.Patch(color=VisualizationStyles.get_color('term_graph', ntype), label=NODE_LABELS[ntype])
            for ntype in NODE_TYPES
        ]
        ax.legend(handles=legend_elements, loc='upper left', fontsize=10, framealpha=0.9)
        ax.set_title(f'{title}\n{graph.number_of_nodes()} terms | {graph.number_of_edges()} child-of edges',
                     fontsize=14, fontweight='bold', pad=20)
        ax.axis('off')
        plt.tight_layout()
        return fig

    def plot_interactive(self, graph: nx.DiGraph, roots, keyword: str = "") -> go.Figure:
        """Plotly version with the term text on hover."""
        pos = graph_layout(graph)
        fig = go.Figure()

        edge_x, edge_y = [], []
        for u, v in graph.edges():
            x0, y0 = pos[u]
            x1, y1 = pos[v]
            edge_x.extend([x0, x1, None])
            edge_y.extend([y0, y1, None])
        fig.add_trace(go.Scatter(
            x=edge_x, y=edge_y, mode='lines',
            line=dict(color='rgba(150,150,150,0.5)', width=1),
            hoverinfo='none', name='Child-of'
        ))

        for ntype in NODE_TYPES:
            nodes = [n for n in graph.nodes if node_type(graph, n, roots) == ntype]
            if not nodes:
                continue
            hovertexts = [f"<b>{n}</b><br>{graph.nodes[n].get('text', '')}" for n in nodes]
            fig.add_trace(go.Scatter(
                x=[pos[n][0] for n in nodes], y=[pos[n][1] for n in nodes],
                mode='markers+text',
                marker=dict(size=22 if ntype == 'root' else 12,
                            color=VisualizationStyles.get_color('term_graph', ntype),
                            line=dict(color='white', width=1)),
                text=nodes, textposition='top center', textfont=dict(size=8),
                hovertext=hovertexts, hoverinfo='text',
                name=NODE_LABELS[ntype]
            ))

        title = f"Expanded GO terms for '{keyword}'" if keyword else "Expanded GO terms"
        fig.update_layout(
            title=dict(text=f'<b>{title}</b>', font=dict(size=16), x=0.5),
            showlegend=True,
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            template='plotly_white',
            width=1100, height=900
        )
        return fig
