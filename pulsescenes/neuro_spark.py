from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import logging
import numpy as np

from pulsecore.primitives import GradientLine, RadialGradient
from pulsescenes.imgutils import TRANSPARENT, with_alpha

logger = logging.getLogger("pulsegrid.scenes.neuro_spark")

NODE_COUNT = 15
CONNECTION_ATTEMPTS = 20
MARGIN_X = 50.0
MARGIN_Y = 100.0
PHASE_STEP = 0.1


@dataclass
class Node:
    id: int
    position: Tuple[float, float]
    size: float
    opacity: float
    scale: float = 1.0


@dataclass
class Connection:
    """Edge between two nodes, referenced by id only"""
    id: int
    start_node_id: int
    end_node_id: int
    intensity: float
    opacity: float


def _span(length, margin):
    # Shrink the margin on canvases too small to keep it
    margin = min(margin, length / 2)
    return margin, length - margin


class NodeGraph:
    """Node arena keyed by id plus the list of connections between them"""

    def __init__(self):
        self.nodes: Dict[int, Node] = {}
        self.connections: List[Connection] = []

    @classmethod
    def random(cls, canvas, rng, node_count=NODE_COUNT, attempts=CONNECTION_ATTEMPTS):
        graph = cls()
        x_lo, x_hi = _span(canvas.width, MARGIN_X)
        y_lo, y_hi = _span(canvas.height, MARGIN_Y)

        for node_id in range(node_count):
            graph.nodes[node_id] = Node(
                id=node_id,
                position=(float(rng.uniform(x_lo, x_hi)), float(rng.uniform(y_lo, y_hi))),
                size=float(rng.uniform(8.0, 16.0)),
                opacity=float(rng.uniform(0.5, 1.0)),
            )

        # Random pairs; duplicates are fine, self-loops are discarded
        ids = list(graph.nodes)
        for _ in range(attempts):
            start_id = ids[rng.integers(len(ids))]
            end_id = ids[rng.integers(len(ids))]
            if start_id == end_id:
                continue
            graph.connections.append(Connection(
                id=len(graph.connections),
                start_node_id=start_id,
                end_node_id=end_id,
                intensity=float(rng.uniform(0.3, 0.8)),
                opacity=float(rng.uniform(0.2, 0.6)),
            ))
        return graph

    def node(self, node_id) -> Optional[Node]:
        return self.nodes.get(node_id)

    def remove_node(self, node_id) -> None:
        # Connections are left in place; frame building skips the dangling ones
        self.nodes.pop(node_id, None)

    def pulse(self, phase):
        """Recompute the oscillating visual properties for the given phase"""
        for i, node in enumerate(self.nodes.values()):
            node.opacity = 0.5 + 0.5 * np.sin(phase + i * 0.2)
            node.scale = 0.8 + 0.4 * np.sin(phase + i * 0.15)
        for i, connection in enumerate(self.connections):
            connection.opacity = 0.2 + 0.4 * np.sin(phase + i * 0.3)
            connection.intensity = 0.3 + 0.5 * np.sin(phase + i * 0.25)


def spark_primitives(graph, config):
    scheme = config.color_scheme
    b = config.brightness
    primitives = []

    for connection in graph.connections:
        start = graph.node(connection.start_node_id)
        end = graph.node(connection.end_node_id)
        if start is None or end is None:
            logger.debug(f"Skipping connection {connection.id}: endpoint missing")
            continue
        primitives.append(GradientLine(
            start=start.position,
            end=end.position,
            start_color=with_alpha(scheme.primary, connection.intensity * b),
            end_color=with_alpha(scheme.accent, connection.intensity * 0.8 * b),
            opacity=float(connection.opacity * b),
            width=config.line_width,
        ))

    node_stops = (scheme.accent, with_alpha(scheme.primary, 0.6), TRANSPARENT)
    for node in graph.nodes.values():
        primitives.append(RadialGradient(
            center=node.position,
            radius=node.size,
            stops=node_stops,
            opacity=float(node.opacity * b),
            scale=float(node.scale),
        ))
    return primitives


def neuro_spark(instate, outstate):
    """Random neural-style graph whose nodes and edges glow out of step"""
    config = outstate['config']

    if instate['count'] == 0:
        instate['phase'] = 0.0
        instate['graph'] = NodeGraph.random(instate['canvas'], outstate['rng'])
        instate['primitives'] = spark_primitives(instate['graph'], config)
        return

    if instate['count'] == -1:
        instate['graph'] = None
        instate['primitives'] = []
        return

    instate['phase'] += PHASE_STEP * outstate['intensity'] * config.speed
    graph = instate['graph']
    graph.pulse(instate['phase'])
    instate['primitives'] = spark_primitives(graph, config)
