"""Seat ledger visualization using matplotlib and NetworkX.

Provides:
- A seat x hop occupancy chart for a single bus (which seat is sold across
  which part of the line), with the active filter highlighted
- A line load diagram: the stations as a path graph, each hop drawn with a
  width proportional to the number of booked seats across the fleet
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Any

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from matplotlib.colors import ListedColormap
import networkx as nx
import numpy as np

from core.dashboard_state import DashboardState
from core.fleet import Bus
from core.topology import StationTopology


FREE_COLOR = "#F1F5F9"
BOOKED_COLOR = "#4F46E5"
FILTER_COLOR = "#F59E0B"
WINDOW_LABEL_COLOR = "#0EA5E9"
STATION_COLOR = "#FFFFFF"
LINE_COLOR = "#94A3B8"


class LedgerVisualizer:
    """Visualizes seat ledgers of a dashboard state."""

    def __init__(
        self,
        state: DashboardState,
        figsize: tuple[int, int] = (10, 8),
        font_size: int = 8,
    ):
        """Initialize the visualizer.

        Args:
            state: The dashboard state to draw.
            figsize: Figure size as (width, height).
            font_size: Font size for tick labels.
        """
        self.state = state
        self.figsize = figsize
        self.font_size = font_size

    @property
    def topology(self) -> StationTopology:
        return self.state.topology

    def hop_load(self) -> np.ndarray:
        """Number of booked seats per hop, summed over the fleet."""
        load = np.zeros(len(self.topology) - 1, dtype=int)
        for bus in self.state.buses:
            load += bus.occupancy_matrix(self.topology).sum(axis=0)
        return load

    def visualize_bus(
        self,
        bus_id: str,
        title: Optional[str] = None,
        show_filter: bool = True,
        save_path: Optional[str | Path] = None,
        show: bool = True,
    ) -> plt.Figure:
        """Draw the seat x hop occupancy chart of one bus.

        Args:
            bus_id: Bus to draw.
            title: Figure title (defaults to the bus id and route).
            show_filter: Whether to shade the hops inside the active filter.
            save_path: If provided, save the figure to this path.
            show: Whether to display the figure.

        Returns:
            The matplotlib Figure object.
        """
        bus = self.state.get_bus(bus_id)
        matrix = bus.occupancy_matrix(self.topology)

        fig, ax = plt.subplots(figsize=self.figsize)
        ax.set_title(title or f"{bus.bus_id} - {bus.route}", fontsize=14, fontweight="bold")

        cmap = ListedColormap([FREE_COLOR, BOOKED_COLOR])
        ax.imshow(matrix.astype(int), cmap=cmap, vmin=0, vmax=1, aspect="auto")

        if show_filter:
            self._draw_filter_band(ax)

        self._label_axes(ax, bus)
        self._draw_legend(ax)

        plt.tight_layout()

        if save_path:
            self._save(fig, save_path)

        if show:
            plt.show()

        return fig

    def _save(self, fig: plt.Figure, save_path: str) -> None:
        """Write the figure, closing it if the file cannot be written."""
        try:
            fig.savefig(save_path, dpi=150, bbox_inches="tight")
        except OSError:
            plt.close(fig)
            raise

    def _draw_filter_band(self, ax: plt.Axes) -> None:
        """Outline the hops covered by the active filter."""
        start, end = self.topology.segment_indices(
            self.state.station_filter.pickup, self.state.station_filter.drop_off
        )
        ax.axvspan(start - 0.5, end - 0.5, facecolor="none", edgecolor=FILTER_COLOR, linewidth=2)

    def _label_axes(self, ax: plt.Axes, bus: Bus) -> None:
        ax.set_xticks(range(len(self.topology) - 1))
        ax.set_xticklabels(self.topology.hop_labels(), rotation=30, ha="right", fontsize=self.font_size)
        ax.set_yticks(range(bus.capacity))
        ax.set_yticklabels(
            [f"{i + 1}{' W' if seat.is_window else ''}" for i, seat in enumerate(bus.seats)],
            fontsize=self.font_size,
        )
        for label, seat in zip(ax.get_yticklabels(), bus.seats):
            if seat.is_window:
                label.set_color(WINDOW_LABEL_COLOR)
        ax.set_xlabel("Hop")
        ax.set_ylabel("Seat")

    def _draw_legend(self, ax: plt.Axes) -> None:
        legend_elements = [
            mpatches.Patch(facecolor=FREE_COLOR, edgecolor="black", label="Free"),
            mpatches.Patch(facecolor=BOOKED_COLOR, edgecolor="black", label="Booked"),
            mpatches.Patch(facecolor="none", edgecolor=FILTER_COLOR, label="Active filter"),
        ]
        ax.legend(handles=legend_elements, loc="upper left", bbox_to_anchor=(1.02, 1), fontsize=8)

    def _build_line_graph(self) -> nx.Graph:
        """Convert the topology into a path graph annotated with hop load."""
        G = nx.path_graph(len(self.topology))
        nx.set_node_attributes(
            G, {i: name for i, name in enumerate(self.topology.stations)}, "name"
        )
        for (start, end), load in zip(self.topology.hops(), self.hop_load()):
            G.edges[start, end]["load"] = int(load)
        return G

    def visualize_line_load(
        self,
        title: str = "Line Load",
        save_path: Optional[str | Path] = None,
        show: bool = True,
    ) -> plt.Figure:
        """Draw the stations as a line with hop widths scaled by load.

        Returns:
            The matplotlib Figure object.
        """
        G = self._build_line_graph()
        pos = {i: (i, 0) for i in G.nodes()}
        loads = [G.edges[e]["load"] for e in G.edges()]
        max_load = max(loads) if loads and max(loads) > 0 else 1

        fig, ax = plt.subplots(figsize=(self.figsize[0], 3))
        ax.set_title(title, fontsize=14, fontweight="bold")

        nx.draw_networkx_edges(
            G, pos,
            width=[1 + 8 * load / max_load for load in loads],
            edge_color=LINE_COLOR,
            ax=ax,
        )
        nx.draw_networkx_edge_labels(
            G, pos,
            edge_labels={e: str(G.edges[e]["load"]) for e in G.edges()},
            font_size=self.font_size,
            ax=ax,
        )
        nx.draw_networkx_nodes(
            G, pos,
            node_color=STATION_COLOR,
            edgecolors="#333333",
            node_size=400,
            ax=ax,
        )
        nx.draw_networkx_labels(
            G, {i: (x, y - 0.08) for i, (x, y) in pos.items()},
            labels=nx.get_node_attributes(G, "name"),
            font_size=self.font_size,
            verticalalignment="top",
            ax=ax,
        )

        ax.axis("off")
        plt.tight_layout()

        if save_path:
            self._save(fig, save_path)

        if show:
            plt.show()

        return fig


def visualize_bus(
    state: DashboardState,
    bus_id: str,
    save_path: Optional[str | Path] = None,
    show: bool = True,
    **kwargs: Any,
) -> plt.Figure:
    """Convenience function to draw one bus's seat ledger."""
    visualizer = LedgerVisualizer(state)
    return visualizer.visualize_bus(bus_id, save_path=save_path, show=show, **kwargs)


def visualize_line_load(
    state: DashboardState,
    save_path: Optional[str | Path] = None,
    show: bool = True,
) -> plt.Figure:
    """Convenience function to draw the fleet-wide line load."""
    return LedgerVisualizer(state).visualize_line_load(save_path=save_path, show=show)
