"""
CLI Parameter Validators

Checks run parameters before any reference data is loaded.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ..models.data_models import TermCategory

logger = logging.getLogger(__name__)


class CLIValidator:
    """Parameter validation for the command line."""

    VALID_CATEGORIES = [c.value for c in TermCategory]

    def validate_keyword(self, keyword: Optional[str]) -> Tuple[bool, Optional[str]]:
        """
        Validate the phenotype keyword.

        The keyword is matched literally, so surrounding whitespace is kept
        but a keyword made only of whitespace is refused.

        Returns:
            (is_valid, error_message)
        """
        if keyword is None or len(keyword) == 0:
            return False, "Keyword cannot be empty"

        if len(keyword.strip()) == 0:
            return False, "Keyword cannot be only whitespace"

        if len(keyword) > 200:
            return False, "Keyword too long (maximum 200 characters)"

        if keyword != keyword.strip():
            logger.warning(f"Keyword '{keyword}' has surrounding whitespace; it is matched as given")

        return True, None

    def validate_category(self, category: Optional[str]) -> Tuple[bool, Optional[str]]:
        if not category:
            return True, None

        if category not in self.VALID_CATEGORIES:
            return False, f"Invalid category: {category}. Must be one of: {', '.join(self.VALID_CATEGORIES)}"

        return True, None

    def validate_input_file(self, path: Optional[str], label: str, required: bool = True) -> Tuple[bool, Optional[str]]:
        """
        Validate that an input file exists.

        Args:
            path: File path
            label: Name used in the message (e.g. "ontology file")
            required: Whether a missing value is an error
        """
        if not path:
            if required:
                return False, f"{label} is required"
            return True, None

        file_path = Path(path)
        if not file_path.exists():
            return False, f"{label} not found: {path}"
        if not file_path.is_file():
            return False, f"{label} is not a file: {path}"

        return True, None

    def validate_run(
        self,
        keyword: Optional[str],
        obo_path: Optional[str],
        gaf_path: Optional[str],
        xref_path: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Tuple[bool, List[str]]:
        """
        Validate every run parameter.

        Returns:
            (is_valid, error_messages)
        """
        errors = []
        for is_valid, error in [
            self.validate_keyword(keyword),
            self.validate_category(category),
            self.validate_input_file(obo_path, "Ontology file"),
            self.validate_input_file(gaf_path, "Annotation file"),
            self.validate_input_file(xref_path, "Cross-reference file", required=False),
        ]:
            if not is_valid:
                errors.append(error)
        return len(errors) == 0, errors
