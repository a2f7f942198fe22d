"""Matplotlib plotting backend for radial distribution functions."""

from pathlib import Path
from typing import TYPE_CHECKING, Any

import matplotlib.pyplot as plt

from ...utils.logger import get_logger

if TYPE_CHECKING:
    from ..properties.rdf import RdfResult


def plot_rdf_matplotlib(
    result: "RdfResult",
    output: str | Path | None = None,
    figsize: tuple[int, int] = (8, 5),
    dpi: int = 150,
    label: str | None = None,
    **kwargs: Any,
) -> tuple[plt.Figure, plt.Axes]:
    """
    Plot g(r) using matplotlib.

    Args:
        result: RDF result to plot
        output: Output file path (None = display only)
        figsize: Figure size (width, height)
        dpi: DPI for saved figure
        label: Legend label, defaults to the selection
        **kwargs: Additional arguments passed to ``Axes.plot``

    Returns:
        Tuple of (figure, axes)
    """
    fig, ax = plt.subplots(figsize=figsize)

    label = label or f"{result.selection} (N={result.nframes} frames)"
    ax.plot(result.r, result.gr, label=label, linewidth=2, **kwargs)

    ax.set_xlabel("r (Å)", fontsize=12)
    ax.set_ylabel("g(r)", fontsize=12)
    ax.set_title("Radial Distribution Function", fontsize=14, fontweight="bold")
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.set_xlim(left=0, right=result.rmax)

    plt.tight_layout()

    if output:
        output_path = Path(output)
        fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
        get_logger().info(f"Plot saved to {output_path}")
    else:
        plt.show()

    return fig, ax

