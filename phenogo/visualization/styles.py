"""
Visualization Style Configuration

Provides style presets and color palettes for consistent report figures.
"""

from typing import Dict, Any, List
import matplotlib.pyplot as plt
import matplotlib as mpl


class VisualizationStyles:
    """Centralized style management for visualizations."""

    COLOR_PALETTES = {
        'default': {
            'primary': '#1f77b4',
            'secondary': '#ff7f0e',
            'palette': ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd',
                        '#8c564b', '#e377c2', '#7f7f7f', '#bcbd22', '#17becf']
        },
        'term_graph': {
            'root': '#E41A1C',
            'seed': '#377EB8',
            'recovered': '#4DAF4A',
            'unannotated': '#BAB0AC',
            'edge_is_a': '#999999',
            'edge_other': '#FF7F00',
            'palette': ['#E41A1C', '#377EB8', '#4DAF4A', '#BAB0AC']
        },
        'venn': {
            'palette': ['#4E79A7', '#F28E2B', '#59A14F']
        },
        'chromosome': {
            'backbone': '#D3D3D3',
            'palette': ['#4E79A7', '#F28E2B', '#E15759', '#76B7B2', '#59A14F',
                        '#EDC948', '#B07AA1', '#FF9DA7', '#9C755F', '#BAB0AC']
        },
    }

    STYLE_PRESETS = {
        'publication': {
            'figure.dpi': 300,
            'savefig.dpi': 300,
            'font.size': 10,
            'font.family': 'sans-serif',
            'axes.labelsize': 12,
            'axes.titlesize': 14,
            'legend.fontsize': 10,
            'figure.titlesize': 16,
            'figure.figsize': (10, 8),
            'grid.alpha': 0.3,
            'grid.linestyle': '--',
        },
        'notebook': {
            'figure.dpi': 100,
            'savefig.dpi': 100,
            'font.size': 11,
            'font.family': 'sans-serif',
            'axes.labelsize': 11,
            'axes.titlesize': 13,
            'legend.fontsize': 10,
            'figure.titlesize': 14,
            'figure.figsize': (10, 7),
            'grid.alpha': 0.3,
        }
    }

    @classmethod
    def apply_style(cls, style_name: str = 'publication'):
        """
        Apply a style preset to matplotlib.

        Args:
            style_name: Name of style preset ('publication', 'notebook')
        """
        if style_name not in cls.STYLE_PRESETS:
            raise ValueError(f"Unknown style: {style_name}. Available: {list(cls.STYLE_PRESETS.keys())}")

        plt.style.use('seaborn-v0_8-whitegrid')
        for key, value in cls.STYLE_PRESETS[style_name].items():
            mpl.rcParams[key] = value

    @classmethod
    def get_palette(cls, palette_name: str = 'default') -> List[str]:
        if palette_name not in cls.COLOR_PALETTES:
            return cls.COLOR_PALETTES['default']['palette']
        return cls.COLOR_PALETTES[palette_name]['palette']

    @classmethod
    def get_color(cls, palette_name: str, color_name: str) -> str:
        palette = cls.COLOR_PALETTES.get(palette_name, cls.COLOR_PALETTES['default'])
        return palette.get(color_name, palette.get('primary', '#1f77b4'))

    @classmethod
    def get_figure_size(cls, figure_type: str) -> tuple:
        """Figure size in inches for 'network', 'venn', 'barplot'."""
        sizes = {
            'network': (14, 12),
            'venn': (10, 10),
            'barplot': (10, 6),
        }
        return sizes.get(figure_type, (10, 8))

    @classmethod
    def get_network_style(cls) -> Dict[str, Any]:
        """Default NetworkX drawing parameters."""
        return {
            'node_size': 400,
            'root_size_factor': 2.0,
            'alpha': 0.9,
            'linewidths': 1.5,
            'width': 1.0,
            'font_size': 7,
            'max_labels': 60,
        }
