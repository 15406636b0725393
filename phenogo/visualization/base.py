"""
Base Visualizer Module

Provides common functionality for all report visualizers:
- Style configuration
- Output path management
- Saving static figures and interactive HTML
"""

import logging
from pathlib import Path
from typing import List
from abc import ABC, abstractmethod

import matplotlib.pyplot as plt

from .styles import VisualizationStyles

logger = logging.getLogger(__name__)


class BaseVisualizer(ABC):
    """
    Base class for all report visualizers.

    Provides common functionality for managing output and applying
    consistent styling across all figures.
    """

    def __init__(self, style: str = 'publication'):
        """
        Initialize base visualizer.

        Args:
            style: Style preset ('publication', 'notebook')
        """
        self.style = style
        VisualizationStyles.apply_style(style)

    def create_output_dir(self, output_dir) -> Path:
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        return output_path

    def save_figure(
        self,
        fig: plt.Figure,
        output_path: Path,
        filename: str,
        formats: List[str] = ['png']
    ) -> List[Path]:
        """
        Save figure in multiple formats.

        Args:
            fig: Matplotlib figure to save
            output_path: Output directory path
            filename: Base filename (without extension)
            formats: List of formats ('png', 'pdf', 'svg')

        Returns:
            List of saved file paths
        """
        saved_files = []

        for fmt in formats:
            file_path = Path(output_path) / f"{filename}.{fmt}"
            try:
                fig.savefig(
                    file_path,
                    format=fmt,
                    bbox_inches='tight',
                    facecolor='white',
                    edgecolor='none'
                )
                saved_files.append(file_path)
                logger.info(f"Saved figure: {file_path}")
            except (OSError, ValueError) as e:
                logger.error(f"Failed to save figure as {fmt}: {e}")

        plt.close(fig)
        return saved_files

    def save_html(self, fig, output_path: Path, filename: str) -> Path:
        """Write a plotly figure as a standalone HTML page."""
        file_path = Path(output_path) / f"{filename}.html"
        fig.write_html(str(file_path), include_plotlyjs='cdn')
        logger.info(f"Saved interactive figure: {file_path}")
        return file_path

    def placeholder_figure(self, message: str, title: str) -> plt.Figure:
        """Figure holding only a centred message, used when there is nothing to draw."""
        fig, ax = plt.subplots(figsize=(8, 6))
        ax.text(0.5, 0.5, message, ha='center', va='center', fontsize=14)
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.axis('off')
        return fig

    @abstractmethod
    def visualize(self, *args, **kwargs) -> List[Path]:
        """Generate this visualizer's files and return their paths."""
        pass
