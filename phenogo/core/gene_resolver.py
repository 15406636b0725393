"""
Gene Resolver

Joins the pathway partition with the term -> gene annotations and maps every
organism (primary) gene id to the NCBI (secondary) id space through a
cross-reference table.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Set

import pandas as pd

from .annotation_loader import AnnotationSet
from .exceptions import ReferenceDataError
from .graph_expander import ExpansionResult
from .pathway_partitioner import PathwayPartition
from ..models.data_models import GeneAssociation

logger = logging.getLogger(__name__)

# Placeholder used by NCBI gene_info for an empty field
MISSING_VALUES = {'', '-'}


class CrossReference:
    """Bidirectional primary <-> secondary gene id mapping."""

    def __init__(self, pairs=(), primary_name: str = "primary", secondary_name: str = "secondary"):
        self.primary_name = primary_name
        self.secondary_name = secondary_name
        self._forward: Dict[str, List[str]] = defaultdict(list)
        self._reverse: Dict[str, List[str]] = defaultdict(list)
        for primary, secondary in pairs:
            self.add(primary, secondary)

    def add(self, primary: str, secondary: str) -> None:
        if secondary not in self._forward[primary]:
            self._forward[primary].append(secondary)
        if primary not in self._reverse[secondary]:
            self._reverse[secondary].append(primary)

    def secondary_for(self, primary: str) -> List[str]:
        return list(self._forward.get(primary, []))

    def primary_for(self, secondary: str) -> List[str]:
        return list(self._reverse.get(secondary, []))

    def __len__(self) -> int:
        return sum(len(v) for v in self._forward.values())

    def __contains__(self, primary: str) -> bool:
        return primary in self._forward


def load_cross_reference(
    path: str,
    primary_column: str = "LocusTag",
    secondary_column: str = "GeneID",
    sep: str = "\t",
) -> CrossReference:
    """
    Load a cross-reference table from any delimited file.

    Works directly on NCBI ``gene_info`` files (``LocusTag`` -> ``GeneID``).
    Rows where either column is blank or ``-`` are ignored.

    Raises:
        ReferenceDataError: If the file is missing or lacks a named column
    """
    xref_path = Path(path)
    if not xref_path.exists():
        raise ReferenceDataError("cross_reference", str(xref_path), "file not found")

    try:
        df = pd.read_csv(
            xref_path,
            sep=sep,
            dtype=str,
            keep_default_na=False,
            usecols=[primary_column, secondary_column],
            compression='infer',
        )
    except ValueError as e:
        # pandas reports missing usecols as ValueError
        raise ReferenceDataError("cross_reference", str(xref_path), str(e)) from e
    except (OSError, pd.errors.ParserError) as e:
        raise ReferenceDataError("cross_reference", str(xref_path), str(e)) from e

    df = df.apply(lambda col: col.str.strip())
    df = df[~df[primary_column].isin(MISSING_VALUES) & ~df[secondary_column].isin(MISSING_VALUES)]

    xref = CrossReference(
        zip(df[primary_column], df[secondary_column]),
        primary_name=primary_column,
        secondary_name=secondary_column,
    )
    logger.info(f"Loaded {len(xref)} {primary_column} -> {secondary_column} cross-references from {xref_path}")
    return xref


def resolve_genes(
    partition: PathwayPartition,
    expansion: ExpansionResult,
    annotations: AnnotationSet,
    xref: Optional[CrossReference] = None,
) -> List[GeneAssociation]:
    """
    Build the association rows (metadata fields left blank).

    One row is produced per (root, term, gene, evidence, secondary id). The
    same gene appears once per supporting evidence code; statistics must
    deduplicate on (pathway, term, gene) themselves.

    - a gene with no secondary mapping yields one row with a blank secondary id
    - a term with no annotated gene yields one row with blank gene fields

    Args:
        partition: Pathway partition of the expanded graph
        expansion: Expanded graph with term texts
        annotations: Term -> (gene, evidence) mapping
        xref: Primary -> secondary id mapping; when None every secondary id
            is blank

    Returns:
        Rows ordered by pathway, term, gene and evidence
    """
    rows: List[GeneAssociation] = []
    unmapped: Set[str] = set()

    for pathway in partition.pathways:
        for term_id in pathway.terms:
            term_text = expansion.text(term_id)
            genes = annotations.genes_for(term_id)
            for root in pathway.roots:
                if not genes:
                    rows.append(GeneAssociation(pathway_id=root, pathway_key=pathway.key,
                                                term_id=term_id, term_text=term_text))
                    continue
                for gene_id, evidence in genes:
                    secondaries = xref.secondary_for(gene_id) if xref is not None else []
                    if not secondaries:
                        unmapped.add(gene_id)
                        secondaries = [None]
                    for secondary in secondaries:
                        rows.append(GeneAssociation(
                            pathway_id=root,
                            pathway_key=pathway.key,
                            term_id=term_id,
                            term_text=term_text,
                            gene_id=gene_id,
                            evidence=evidence,
                            secondary_id=secondary,
                        ))

    if unmapped and xref is not None:
        logger.warning(f"{len(unmapped)} genes have no {xref.secondary_name} mapping; secondary id left blank")
    logger.info(f"Resolved {len(rows)} gene associations across {len(partition.pathways)} pathways")
    return rows


def unmapped_genes(rows: List[GeneAssociation]) -> List[str]:
    """Primary gene ids that ended up without a secondary id."""
    return sorted({r.gene_id for r in rows if r.gene_id and not r.secondary_id})


def secondary_ids(rows: List[GeneAssociation]) -> List[str]:
    """Unique secondary ids, sorted, for the metadata lookup."""
    return sorted({r.secondary_id for r in rows if r.secondary_id})
