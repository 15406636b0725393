"""
Unit tests for ontology and GAF loading.
"""

import gzip

import pytest

from phenogo.core.annotation_loader import load_annotations, load_ontology, read_gaf
from phenogo.core.exceptions import ReferenceDataError
from phenogo.models.data_models import TermCategory

BP = TermCategory.BIOLOGICAL_PROCESS


class TestLoadOntology:
    """Test OBO loading with pronto."""

    def test_terms_loaded_with_category(self, catalog):
        term = catalog.get("GO:0010374")
        assert term.name == "stomatal complex development"
        assert term.category == BP
        assert catalog.get("GO:0005515").category == TermCategory.MOLECULAR_FUNCTION

    def test_obsolete_terms_excluded(self, catalog):
        assert "GO:0000001" not in catalog

    def test_alt_id_maps_to_primary(self, catalog):
        assert catalog.canonical_id("GO:0010999") == "GO:0010374"
        assert catalog.get("GO:0010999").id == "GO:0010374"

    def test_is_a_and_part_of_edges(self, catalog):
        edges = set(catalog.edges)
        assert ("GO:0010374", "GO:0010375", "is_a") in edges
        assert ("GO:0010374", "GO:0010103", "part_of") in edges
        assert ("GO:0010103", "GO:0010052", "part_of") in edges

    def test_part_of_ignored_when_not_requested(self, obo_file):
        catalog = load_ontology(str(obo_file), relation_types=[])
        assert not [e for e in catalog.edges if e[2] == "part_of"]

    def test_child_edges_restricted_to_category(self, catalog):
        bp_edges = catalog.child_edges(BP)
        assert bp_edges
        mf_terms = {"GO:0003674", "GO:0005515"}
        assert not [e for e in bp_edges if e[0] in mf_terms or e[1] in mf_terms]
        assert catalog.child_edges(TermCategory.MOLECULAR_FUNCTION) == [("GO:0003674", "GO:0005515", "is_a")]

    def test_texts_by_category(self, catalog):
        texts = catalog.texts(BP)
        assert texts["GO:0090333"] == "regulation of stomatal closure"
        assert "GO:0005515" not in texts

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReferenceDataError) as exc_info:
            load_ontology(str(tmp_path / "missing.obo"))
        assert exc_info.value.source == "ontology"


class TestLoadAnnotations:
    """Test GAF loading with pandas."""

    def test_header_lines_skipped(self, gaf_file):
        df = read_gaf(str(gaf_file))
        assert not df['db'].str.startswith('!').any()
        assert len(df) == 9

    def test_not_qualifier_dropped(self, annotations):
        genes = {g for g, _ in annotations.genes_for("GO:0010374")}
        assert "AT2G26330" not in genes
        assert genes == {"AT5G53210"}

    def test_aspect_filter(self, annotations):
        assert "GO:0005515" not in annotations

    def test_evidence_multiplicity_kept(self, annotations):
        assert annotations.genes_for("GO:0010375") == [("AT1G80080", "IEP"), ("AT1G80080", "IMP")]

    def test_taxon_filter(self, gaf_file, catalog):
        everything = load_annotations(str(gaf_file), BP, catalog=catalog)
        assert "HS0001" in everything.gene_ids
        plants = load_annotations(str(gaf_file), BP, taxon="taxon:3702", catalog=catalog)
        assert "HS0001" not in plants.gene_ids

    def test_excluded_evidence(self, gaf_file):
        annotations = load_annotations(str(gaf_file), BP, excluded_evidence=["IEP", "IEA"])
        assert annotations.genes_for("GO:0010375") == [("AT1G80080", "IMP")]

    def test_symbol_as_gene_id(self, gaf_file):
        annotations = load_annotations(str(gaf_file), BP, gene_id_column="db_object_symbol", taxon="3702")
        assert annotations.gene_ids == {"TMM", "SPCH", "MUTE", "FAMA", "OST1"}

    def test_synonym_as_gene_id(self, gaf_file):
        annotations = load_annotations(str(gaf_file), BP, gene_id_column="synonym", taxon="3702")
        assert "AT1G80080" in annotations.gene_ids

    def test_gzipped_file(self, tmp_path, gaf_text):
        path = tmp_path / "tair.gaf.gz"
        with gzip.open(path, "wt") as f:
            f.write(gaf_text)
        annotations = load_annotations(str(path), BP, taxon="3702")
        assert annotations.n_annotations == 6

    def test_unannotated_term_is_empty(self, annotations):
        assert annotations.genes_for("GO:0010103") == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReferenceDataError):
            load_annotations(str(tmp_path / "none.gaf"), BP)

    def test_no_usable_rows(self, gaf_file):
        with pytest.raises(ReferenceDataError) as exc_info:
            load_annotations(str(gaf_file), TermCategory.CELLULAR_COMPONENT)
        assert "no usable" in str(exc_info.value)
