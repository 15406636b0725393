"""
Unit tests for splitting the expanded graph into pathways.
"""

import networkx as nx

from phenogo.core.pathway_partitioner import find_roots, partition_pathways


def _graph(edges, nodes=()):
    graph = nx.DiGraph()
    graph.add_nodes_from(nodes)
    graph.add_edges_from(edges)
    return graph


class TestFindRoots:

    def test_single_root(self):
        assert find_roots(_graph([("A", "B"), ("B", "C")])) == ("A",)

    def test_several_roots_sorted(self):
        assert find_roots(_graph([("Z", "C"), ("A", "C")])) == ("A", "Z")

    def test_cycle_falls_back_to_minimum_in_degree(self):
        graph = _graph([("A", "B"), ("B", "A"), ("C", "A")])
        graph.add_edge("A", "C")
        assert find_roots(graph) == ("B", "C")


class TestPartitionPathways:

    def test_singleton(self):
        partition = partition_pathways(_graph([], nodes=["GO:0010374"]))
        assert len(partition.pathways) == 1
        assert partition.pathways[0].roots == ("GO:0010374",)
        assert partition.roots_of("GO:0010374") == ("GO:0010374",)

    def test_two_disjoint_pathways(self):
        partition = partition_pathways(_graph([("A", "B"), ("A", "C"), ("X", "Y")]))
        assert [p.roots for p in partition.pathways] == [("A",), ("X",)]
        assert partition.roots_of("C") == ("A",)
        assert partition.roots_of("Y") == ("X",)
        assert partition.pathway_of("B").terms == ("A", "B", "C")

    def test_multi_root_preserved(self):
        partition = partition_pathways(_graph([("R1", "C"), ("R2", "C")]))
        assert len(partition.pathways) == 1
        pathway = partition.pathways[0]
        assert pathway.roots == ("R1", "R2")
        assert pathway.key == "R1|R2"
        assert partition.multi_root == [pathway]
        assert partition.root_ids == ["R1", "R2"]

    def test_isolated_node_is_own_pathway(self):
        partition = partition_pathways(_graph([("A", "B")], nodes=["Q"]))
        assert partition.roots_of("Q") == ("Q",)
        assert len(partition.pathways) == 2

    def test_every_term_labelled_once(self):
        graph = _graph([("A", "B"), ("B", "C"), ("D", "C"), ("X", "Y")], nodes=["Q"])
        partition = partition_pathways(graph)
        assert set(partition.assignments) == set(graph.nodes)
        members = [t for p in partition.pathways for t in p.terms]
        assert sorted(members) == sorted(graph.nodes)

    def test_roots_have_no_incoming_edge_in_component(self):
        graph = _graph([("A", "B"), ("B", "C"), ("D", "C")])
        partition = partition_pathways(graph)
        for pathway in partition.pathways:
            for root in pathway.roots:
                assert all(u not in pathway.terms for u, _ in graph.in_edges(root))

    def test_empty_graph(self):
        partition = partition_pathways(nx.DiGraph())
        assert partition.pathways == []
        assert partition.multi_root == []

    def test_fixture_pathways(self, catalog, annotations):
        from phenogo.core.graph_expander import expand_terms
        from phenogo.core.keyword_matcher import match_keyword
        from phenogo.models.data_models import TermCategory

        texts = catalog.texts(TermCategory.BIOLOGICAL_PROCESS)
        expansion = expand_terms(match_keyword(texts, "stomatal"),
                                 catalog.child_edges(TermCategory.BIOLOGICAL_PROCESS), annotations, texts)
        partition = partition_pathways(expansion.graph)
        assert [p.roots for p in partition.pathways] == [("GO:0010119",), ("GO:0010374",)]
        assert partition.roots_of("GO:0010052") == ("GO:0010374",)
