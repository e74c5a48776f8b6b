"""Force-directed rendering of graph payloads with pyvis (vis-network)."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pyvis.network import Network

from ..models.graph import ColorMode, EdgeKind, GraphData, GraphNode
from .config import AppConfig, get_config

logger = logging.getLogger(__name__)

VIRIDIS_STOPS = [
    "#440154",
    "#482878",
    "#3E4A89",
    "#31688E",
    "#26828E",
    "#1F9E89",
    "#35B779",
    "#6DCD59",
    "#B4DE2C",
    "#FDE725",
]
CATEGORY10 = [
    "#1F77B4",
    "#FF7F0E",
    "#2CA02C",
    "#D62728",
    "#9467BD",
    "#8C564B",
    "#E377C2",
    "#7F7F7F",
    "#BCBD22",
    "#17BECF",
]
FOCUS_BORDER = "#8B5CF6"
DEFAULT_BORDER = "#374151"
EDGE_COLOR = "#6B7280"
LABEL_COLOR = "#E5E7EB"
NODE_ID_PLACEHOLDER = "__NODE_ID__"
# barnesHut gravity is about ten times the d3 many-body strength for a similar spread.
REPULSION_SCALE = 10


def _hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        raise ValueError(f"Invalid hex color: {hex_color}")
    return tuple(int(hex_color[i : i + 2], 16) for i in (0, 2, 4))


def _rgb_to_hex(rgb: Tuple[int, int, int]) -> str:
    return "#{:02X}{:02X}{:02X}".format(*rgb)


def _blend_hex(color: str, target: str, ratio: float) -> str:
    ratio = max(0.0, min(1.0, ratio))
    r1, g1, b1 = _hex_to_rgb(color)
    r2, g2, b2 = _hex_to_rgb(target)
    r = round(r1 + (r2 - r1) * ratio)
    g = round(g1 + (g2 - g1) * ratio)
    b = round(b1 + (b2 - b1) * ratio)
    return _rgb_to_hex((r, g, b))


def sequential_color(value: float, maximum: float) -> str:
    """Map value in [0, maximum] onto the viridis ramp."""
    if maximum <= 0:
        return VIRIDIS_STOPS[0]
    position = max(0.0, min(1.0, value / maximum)) * (len(VIRIDIS_STOPS) - 1)
    lower = int(math.floor(position))
    if lower >= len(VIRIDIS_STOPS) - 1:
        return VIRIDIS_STOPS[-1]
    return _blend_hex(VIRIDIS_STOPS[lower], VIRIDIS_STOPS[lower + 1], position - lower)


def categorical_color(tag: int) -> str:
    return CATEGORY10[tag % len(CATEGORY10)]


def edge_width(weight: float) -> float:
    return math.sqrt(weight * 10)


class GraphRenderer:
    """Turn a GraphData payload into a fresh vis-network page on every call."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or get_config()

    def physics_options(self) -> Dict[str, Any]:
        return {
            "enabled": True,
            "solver": "barnesHut",
            "barnesHut": {
                "gravitationalConstant": self.config.repulsion * REPULSION_SCALE,
                "centralGravity": 0.3,
                "springLength": self.config.link_distance,
                "springConstant": 0.04,
                "damping": 0.09,
                "avoidOverlap": 1,
            },
            "stabilization": {"enabled": True, "iterations": 200, "fit": True},
        }

    def node_color(self, node: GraphNode, color_by: ColorMode, max_connections: int, focused: bool) -> Dict[str, Any]:
        base = (
            sequential_color(node.connection_count, max_connections)
            if color_by is ColorMode.CONNECTIONS
            else categorical_color(node.group_tag)
        )
        border = FOCUS_BORDER if focused else DEFAULT_BORDER
        return {
            "background": base,
            "border": border,
            "highlight": {"background": _blend_hex(base, "#FFFFFF", 0.18), "border": FOCUS_BORDER},
            "hover": {"background": _blend_hex(base, "#FFFFFF", 0.12), "border": border},
        }

    def build_network(
        self,
        graph: GraphData,
        *,
        color_by: Optional[ColorMode] = None,
        click_url_template: Optional[str] = None,
    ) -> Network:
        if color_by is None:
            color_by = ColorMode.CONNECTIONS if self.config.color_by_connections else ColorMode.GROUP

        net = Network(
            height=self.config.graph_height,
            width="100%",
            directed=False,
            notebook=False,
            bgcolor="#111827",
            font_color=LABEL_COLOR,
            cdn_resources="remote",
        )

        max_connections = max((node.connection_count for node in graph.nodes), default=0)
        for node in graph.nodes:
            focused = node.id == graph.focus_id
            net.add_node(
                node.id,
                label=node.display_name if self.config.show_labels else " ",
                title=f"{node.display_name}\nWords: {node.word_count}\nConnections: {node.connection_count}",
                size=node.visual_size,
                color=self.node_color(node, color_by, max_connections, focused),
                borderWidth=3 if focused else 1.5,
                shape="dot",
            )

        for edge in graph.edges:
            net.add_edge(
                edge.source,
                edge.target,
                width=edge_width(edge.weight),
                color={"color": EDGE_COLOR, "opacity": 0.6},
                dashes=edge.kind is EdgeKind.SIMILARITY,
                title=f"{edge.kind.value} | weight: {edge.weight:.2f}",
            )

        net.options = {
            "physics": self.physics_options(),
            "interaction": {
                "hover": True,
                "dragNodes": True,
                "zoomView": True,
                "navigationButtons": False,
                "tooltipDelay": 120,
            },
            "nodes": {"font": {"size": 12, "color": LABEL_COLOR}},
            "edges": {"smooth": False},
        }

        html = net.generate_html()
        if click_url_template:
            html = html.replace("</body>", self._click_script(click_url_template) + "</body>", 1)
        net.html = html
        return net

    def render_html(self, graph: GraphData, **kwargs: Any) -> str:
        return self.build_network(graph, **kwargs).html

    def export_html(self, graph: GraphData, destination: Path, **kwargs: Any) -> Path:
        """Write the rendered page to disk and return its path."""
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(self.render_html(graph, **kwargs), encoding="utf-8")
        logger.info(
            "Graph exported",
            extra={"destination": str(destination), "node_count": len(graph.nodes)},
        )
        return destination

    @staticmethod
    def _click_script(url_template: str) -> str:
        # Clicking a node hands its id back to the host as the new focus.
        return (
            "<script type=\"text/javascript\">\n"
            f"  var focusUrlTemplate = {json.dumps(url_template)};\n"
            "  network.on(\"click\", function (params) {\n"
            "    if (params.nodes.length > 0) {\n"
            f"      window.location.href = focusUrlTemplate.replace({json.dumps(NODE_ID_PLACEHOLDER)},"
            " encodeURIComponent(params.nodes[0]));\n"
            "    }\n"
            "  });\n"
            "</script>\n"
        )


__all__ = [
    "GraphRenderer",
    "NODE_ID_PLACEHOLDER",
    "sequential_color",
    "categorical_color",
    "edge_width",
]
