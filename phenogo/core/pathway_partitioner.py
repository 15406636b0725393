"""
Pathway Partitioner

Splits the expanded term graph into pathways: one pathway per weakly
connected component, keyed by the component's root terms (no incoming edge
inside the component). A component can have several roots; all of them are
kept and every term of the component is attached to every root.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import networkx as nx

from ..models.data_models import Pathway

logger = logging.getLogger(__name__)


@dataclass
class PathwayPartition:
    """Pathways of the expanded graph and the term -> roots labelling."""
    pathways: List[Pathway]
    assignments: Dict[str, Tuple[str, ...]]

    def roots_of(self, term_id: str) -> Tuple[str, ...]:
        return self.assignments[term_id]

    def pathway_of(self, term_id: str) -> Pathway:
        roots = self.assignments[term_id]
        return next(p for p in self.pathways if p.roots == roots)

    @property
    def root_ids(self) -> List[str]:
        return sorted({root for p in self.pathways for root in p.roots})

    @property
    def multi_root(self) -> List[Pathway]:
        return [p for p in self.pathways if p.is_multi_root]


def find_roots(component: nx.DiGraph) -> Tuple[str, ...]:
    """
    Roots of one component: nodes with zero in-degree inside it.

    A component without such a node (only possible when the input has a
    cycle) falls back to its nodes of minimum in-degree.
    """
    in_degrees = dict(component.in_degree())
    roots = [node for node, degree in in_degrees.items() if degree == 0]
    if not roots:
        lowest = min(in_degrees.values())
        roots = [node for node, degree in in_degrees.items() if degree == lowest]
        logger.warning(f"Component without a root; using minimum in-degree nodes {sorted(roots)}")
    return tuple(sorted(roots))


def partition_pathways(graph: nx.DiGraph) -> PathwayPartition:
    """
    Partition the expanded term graph into pathways.

    Args:
        graph: Expanded term graph (edges point from parent to child)

    Returns:
        PathwayPartition where every node is labelled with exactly one
        component's roots. Isolated nodes are singleton pathways rooted at
        themselves.
    """
    pathways: List[Pathway] = []
    assignments: Dict[str, Tuple[str, ...]] = {}

    for nodes in nx.weakly_connected_components(graph):
        component = graph.subgraph(nodes)
        roots = find_roots(component)
        pathway = Pathway(roots=roots, terms=tuple(sorted(nodes)))
        pathways.append(pathway)
        for term_id in nodes:
            assignments[term_id] = roots

    pathways.sort(key=lambda p: p.roots)

    multi_root = [p.key for p in pathways if p.is_multi_root]
    if multi_root:
        logger.info(f"{len(multi_root)} pathways have more than one root: {', '.join(multi_root)}")
    logger.info(f"Partitioned {graph.number_of_nodes()} terms into {len(pathways)} pathways")

    return PathwayPartition(pathways=pathways, assignments=assignments)
