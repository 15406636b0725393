"""
Unit tests for gene resolution and the cross-reference table.
"""

import pytest

from phenogo.core.annotation_loader import AnnotationSet
from phenogo.core.exceptions import ReferenceDataError
from phenogo.core.gene_resolver import (
    CrossReference,
    load_cross_reference,
    resolve_genes,
    secondary_ids,
    unmapped_genes,
)
from phenogo.core.graph_expander import expand_terms
from phenogo.core.keyword_matcher import match_keyword
from phenogo.core.pathway_partitioner import partition_pathways
from phenogo.models.data_models import TermCategory

BP = TermCategory.BIOLOGICAL_PROCESS


@pytest.fixture
def stages(catalog, annotations):
    texts = catalog.texts(BP)
    expansion = expand_terms(match_keyword(texts, "stomatal"), catalog.child_edges(BP), annotations, texts)
    return partition_pathways(expansion.graph), expansion


@pytest.fixture
def xref(xref_file):
    return load_cross_reference(str(xref_file))


class TestCrossReference:

    def test_bidirectional(self):
        xref = CrossReference([("AT1", "100"), ("AT1", "101"), ("AT2", "100")])
        assert xref.secondary_for("AT1") == ["100", "101"]
        assert xref.primary_for("100") == ["AT1", "AT2"]
        assert len(xref) == 3

    def test_duplicate_pairs_ignored(self):
        xref = CrossReference([("AT1", "100"), ("AT1", "100")])
        assert len(xref) == 1

    def test_unknown_id(self):
        xref = CrossReference()
        assert xref.secondary_for("AT9") == []
        assert "AT9" not in xref


class TestLoadCrossReference:

    def test_gene_info_columns(self, xref):
        assert xref.secondary_for("AT1G80080") == ["844348"]
        assert xref.primary_for("835402") == ["AT5G53210"]

    def test_dash_placeholder_dropped(self, xref):
        assert "-" not in xref
        assert xref.primary_for("817174") == []
        assert len(xref) == 4

    def test_custom_columns(self, xref_file):
        xref = load_cross_reference(str(xref_file), primary_column="Symbol", secondary_column="GeneID")
        assert xref.secondary_for("FAMA") == ["822012"]

    def test_missing_column(self, xref_file):
        with pytest.raises(ReferenceDataError) as exc_info:
            load_cross_reference(str(xref_file), primary_column="Locus")
        assert exc_info.value.source == "cross_reference"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReferenceDataError):
            load_cross_reference(str(tmp_path / "absent.tsv"))


class TestResolveGenes:

    def test_row_count(self, stages, annotations, xref):
        partition, expansion = stages
        rows = resolve_genes(partition, expansion, annotations, xref)
        assert len(rows) == 8

    def test_evidence_multiplicity(self, stages, annotations, xref):
        partition, expansion = stages
        rows = resolve_genes(partition, expansion, annotations, xref)
        tmm = [r for r in rows if r.gene_id == "AT1G80080"]
        assert sorted(r.evidence for r in tmm) == ["IEP", "IMP"]
        assert {r.secondary_id for r in tmm} == {"844348"}

    def test_unannotated_term_has_blank_row(self, stages, annotations, xref):
        partition, expansion = stages
        rows = resolve_genes(partition, expansion, annotations, xref)
        blank = [r for r in rows if r.term_id == "GO:0010103"]
        assert len(blank) == 1
        assert blank[0].gene_id is None
        assert blank[0].pathway_id == "GO:0010374"
        assert blank[0].term_text == "stomatal complex morphogenesis"

    def test_unmapped_gene_has_blank_secondary(self, stages, annotations, xref):
        partition, expansion = stages
        rows = resolve_genes(partition, expansion, annotations, xref)
        ost1 = [r for r in rows if r.gene_id == "AT4G33950"]
        assert len(ost1) == 1
        assert ost1[0].secondary_id is None
        assert unmapped_genes(rows) == ["AT4G33950"]

    def test_pathway_label_matches_partition(self, stages, annotations, xref):
        partition, expansion = stages
        for row in resolve_genes(partition, expansion, annotations, xref):
            assert row.pathway_id in partition.roots_of(row.term_id)
            assert row.pathway_key == partition.pathway_of(row.term_id).key

    def test_without_cross_reference(self, stages, annotations):
        partition, expansion = stages
        rows = resolve_genes(partition, expansion, annotations)
        assert len(rows) == 8
        assert secondary_ids(rows) == []

    def test_secondary_ids_unique_sorted(self, stages, annotations, xref):
        partition, expansion = stages
        rows = resolve_genes(partition, expansion, annotations, xref)
        assert secondary_ids(rows) == ["819785", "822012", "835402", "844348"]

    def test_multi_root_repeats_rows_per_root(self, stages):
        import networkx as nx

        from phenogo.core.graph_expander import ExpansionResult

        graph = nx.DiGraph([("R1", "C"), ("R2", "C")])
        expansion = ExpansionResult(graph=graph, candidates={"R1": "r1", "R2": "r2", "C": "c"}, seeds={"R1", "R2"})
        annotations = AnnotationSet(category=BP, term_to_genes={"C": [("G1", "IDA")]})
        rows = resolve_genes(partition_pathways(graph), expansion, annotations)
        assert sorted(r.pathway_id for r in rows if r.term_id == "C") == ["R1", "R2"]
        assert {r.pathway_key for r in rows} == {"R1|R2"}
