"""
Unit tests for keyword matching.
"""

from phenogo.core.keyword_matcher import match_keyword
from phenogo.models.data_models import TermCategory


class TestMatchKeyword:
    """Literal substring selection over term texts."""

    def test_matches_substring(self):
        texts = {
            "GO:1": "stomatal complex development",
            "GO:2": "guard cell differentiation",
            "GO:3": "regulation of stomatal closure",
        }
        assert match_keyword(texts, "stomatal") == {
            "GO:1": "stomatal complex development",
            "GO:3": "regulation of stomatal closure",
        }

    def test_case_sensitive(self):
        texts = {"GO:1": "Stomatal lineage", "GO:2": "stomatal lineage"}
        assert list(match_keyword(texts, "stomatal")) == ["GO:2"]

    def test_matches_inside_words(self):
        """No word boundaries: 'stoma' also hits 'stomatal'."""
        texts = {"GO:1": "stomatal closure"}
        assert match_keyword(texts, "stoma") == texts

    def test_no_match_is_empty(self):
        assert match_keyword({"GO:1": "root hair elongation"}, "stomatal") == {}

    def test_empty_dictionary(self):
        assert match_keyword({}, "stomatal") == {}

    def test_preserves_input_order(self):
        texts = {"GO:9": "stomatal b", "GO:1": "stomatal a"}
        assert list(match_keyword(texts, "stomatal")) == ["GO:9", "GO:1"]

    def test_result_is_subset(self, catalog):
        texts = catalog.texts(TermCategory.BIOLOGICAL_PROCESS)
        matches = match_keyword(texts, "stomatal")
        assert set(matches) <= set(texts)
        assert all(texts[t] == text for t, text in matches.items())
        assert set(matches) == {"GO:0010374", "GO:0010375", "GO:0010103", "GO:0010119", "GO:0090333"}
