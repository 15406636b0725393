"""
Graph Expander

Grows the keyword candidate set through the ontology's child-of relation so
that terms whose text misses the keyword, but which are more specific forms
of a matched term, are picked up too.

Edge direction: ``u -> v`` means ``v`` is a child (more specific term) of ``u``.
The expansion is a best-effort enrichment: the resulting term set is a lower
bound on the related terms, not an exhaustive one.
"""

import logging
from dataclasses import dataclass, field
from typing import Container, Dict, Iterable, List, Mapping, Set

import networkx as nx

from .annotation_loader import ChildEdge

logger = logging.getLogger(__name__)


@dataclass
class ExpansionResult:
    """Expanded term graph plus the reconciliation report."""
    graph: nx.DiGraph
    candidates: Dict[str, str]
    seeds: Set[str]
    recovered: List[str] = field(default_factory=list)
    unannotated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def terms(self) -> List[str]:
        return sorted(self.graph.nodes)

    def text(self, term_id: str) -> str:
        return self.candidates.get(term_id, "")


def build_term_graph(child_edges: Iterable[ChildEdge]) -> nx.DiGraph:
    """
    Build a directed graph from (parent, child, relation) edges.

    When a pair is related more than once (is_a and part_of), the first
    relation seen is kept.
    """
    graph = nx.DiGraph()
    for parent, child, relation in child_edges:
        if not graph.has_edge(parent, child):
            graph.add_edge(parent, child, relation=relation)
    return graph


def expand_terms(
    candidates: Mapping[str, str],
    child_edges: Iterable[ChildEdge],
    annotated_terms: Container[str],
    term_dictionary: Mapping[str, str],
    include_ancestors: bool = False,
) -> ExpansionResult:
    """
    Expand the candidate terms through the child-of relation.

    Args:
        candidates: Seed term id -> text (the keyword matches)
        child_edges: (parent, child, relation) edges of one category
        annotated_terms: Terms present in the annotation mapping
        term_dictionary: Authoritative term id -> text
        include_ancestors: Also pull in every ancestor of the seeds. Off by
            default: ancestors reach the category root and would merge all
            pathways into one.

    Returns:
        ExpansionResult whose graph is the subgraph induced on the seeds and
        every term reachable from them, so that edges between two seeds are
        kept.
    """
    full_graph = build_term_graph(child_edges)
    seeds = set(candidates)

    closure: Set[str] = set(seeds)
    for term_id in seeds:
        if term_id not in full_graph:
            continue
        closure |= nx.descendants(full_graph, term_id)
        if include_ancestors:
            closure |= nx.ancestors(full_graph, term_id)

    graph = full_graph.subgraph(closure).copy()
    # Seeds without any child-of edge still form their own pathway
    graph.add_nodes_from(t for t in seeds if t not in graph)

    merged: Dict[str, str] = dict(candidates)
    recovered: List[str] = []
    skipped: List[str] = []
    for term_id in sorted(closure - seeds):
        text = term_dictionary.get(term_id)
        if text is None:
            logger.warning(f"Term {term_id} reached by expansion is not in the term dictionary; skipping")
            skipped.append(term_id)
            continue
        merged[term_id] = text
        recovered.append(term_id)

    graph.remove_nodes_from(skipped)

    unannotated = sorted(t for t in graph.nodes if t not in annotated_terms)
    if unannotated:
        logger.info(f"{len(unannotated)} expanded terms have no gene annotation: {', '.join(unannotated[:10])}"
                    + (" ..." if len(unannotated) > 10 else ""))

    for term_id in graph.nodes:
        graph.nodes[term_id]['text'] = merged.get(term_id, "")
        graph.nodes[term_id]['seed'] = term_id in seeds
        graph.nodes[term_id]['annotated'] = term_id in annotated_terms

    if not nx.is_directed_acyclic_graph(graph):
        logger.warning("Expanded term graph contains a cycle; check the ontology relations used")

    logger.info(
        f"Expanded {len(seeds)} seed terms to {graph.number_of_nodes()} terms "
        f"({len(recovered)} recovered, {len(skipped)} skipped) with {graph.number_of_edges()} edges"
    )
    return ExpansionResult(
        graph=graph,
        candidates={t: merged[t] for t in graph.nodes if t in merged},
        seeds=seeds,
        recovered=recovered,
        unannotated=unannotated,
        skipped=skipped,
    )
