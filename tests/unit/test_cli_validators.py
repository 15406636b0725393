"""
Unit Tests for CLI Validators

Tests for run parameter validation.
"""

import pytest

from phenogo.cli.validators import CLIValidator


class TestCLIValidator:
    """Test CLI parameter validation."""

    @pytest.fixture
    def validator(self):
        """Create validator instance."""
        return CLIValidator()

    # Keyword Validation Tests
    def test_validate_keyword_valid(self, validator):
        is_valid, error = validator.validate_keyword("stomatal")
        assert is_valid is True
        assert error is None

    def test_validate_keyword_empty(self, validator):
        is_valid, error = validator.validate_keyword("")
        assert is_valid is False
        assert "cannot be empty" in error.lower()

    def test_validate_keyword_none(self, validator):
        is_valid, _ = validator.validate_keyword(None)
        assert is_valid is False

    def test_validate_keyword_whitespace(self, validator):
        is_valid, error = validator.validate_keyword("   ")
        assert is_valid is False
        assert "whitespace" in error.lower()

    def test_validate_keyword_too_long(self, validator):
        is_valid, error = validator.validate_keyword("a" * 201)
        assert is_valid is False
        assert "too long" in error.lower()

    def test_validate_keyword_surrounding_whitespace_allowed(self, validator):
        is_valid, error = validator.validate_keyword(" stomatal ")
        assert is_valid is True
        assert error is None

    # Category Validation Tests
    def test_validate_category_valid(self, validator):
        for category in ["biological_process", "molecular_function", "cellular_component"]:
            is_valid, error = validator.validate_category(category)
            assert is_valid is True
            assert error is None

    def test_validate_category_default(self, validator):
        assert validator.validate_category(None) == (True, None)

    def test_validate_category_invalid(self, validator):
        is_valid, error = validator.validate_category("phenotype")
        assert is_valid is False
        assert "invalid category" in error.lower()

    # File Validation Tests
    def test_validate_input_file_exists(self, validator, obo_file):
        assert validator.validate_input_file(str(obo_file), "Ontology file") == (True, None)

    def test_validate_input_file_missing(self, validator, tmp_path):
        is_valid, error = validator.validate_input_file(str(tmp_path / "none.obo"), "Ontology file")
        assert is_valid is False
        assert "not found" in error

    def test_validate_input_file_directory(self, validator, tmp_path):
        is_valid, error = validator.validate_input_file(str(tmp_path), "Ontology file")
        assert is_valid is False
        assert "not a file" in error

    def test_validate_input_file_optional(self, validator):
        assert validator.validate_input_file(None, "Cross-reference file", required=False) == (True, None)

    def test_validate_input_file_required(self, validator):
        is_valid, error = validator.validate_input_file(None, "Ontology file")
        assert is_valid is False
        assert "required" in error

    # Full Run Validation
    def test_validate_run_valid(self, validator, obo_file, gaf_file, xref_file):
        is_valid, errors = validator.validate_run("stomatal", str(obo_file), str(gaf_file), str(xref_file))
        assert is_valid is True
        assert errors == []

    def test_validate_run_collects_all_errors(self, validator, tmp_path):
        is_valid, errors = validator.validate_run("", str(tmp_path / "a.obo"), None, category="bogus")
        assert is_valid is False
        assert len(errors) == 4
