"""
Keyword Matcher

Selects the terms whose text contains the phenotype keyword. Matching is a
literal, case-sensitive substring test; the result is deliberately broad and
is meant to be curated downstream.
"""

import logging
from typing import Dict, Mapping

logger = logging.getLogger(__name__)


def match_keyword(term_texts: Mapping[str, str], keyword: str) -> Dict[str, str]:
    """
    Return the subset of ``term_texts`` whose text contains ``keyword``.

    Args:
        term_texts: Term id -> display text
        keyword: Literal substring to look for

    Returns:
        Term id -> text for every match, in the input order. An empty dict is
        a valid result.
    """
    matches = {term_id: text for term_id, text in term_texts.items() if keyword in text}
    logger.info(f"Keyword '{keyword}' matched {len(matches)} of {len(term_texts)} terms")
    return matches
