"""
Annotation Loader

Loads the two reference sources the pipeline is built on:

- the ontology (OBO flat file, parsed with pronto) giving term text, category
  and the child-of relation between terms;
- the organism's GO annotation file (GAF 2.x, read with pandas) giving the
  genes annotated to each term together with the evidence code.

Either source being absent or unusable is fatal: the run cannot produce a
meaningful table without them, so a ReferenceDataError is raised before any
output is written.
"""

import csv
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import pandas as pd
from pronto import Ontology

from .exceptions import ReferenceDataError
from ..models.data_models import Term, TermCategory

logger = logging.getLogger(__name__)

GAF_COLUMNS = [
    'db', 'db_object_id', 'db_object_symbol', 'qualifier', 'go_id',
    'db_reference', 'evidence_code', 'with_from', 'aspect', 'db_object_name',
    'db_object_synonym', 'db_object_type', 'taxon', 'date', 'assigned_by',
    'annotation_extension', 'gene_product_form_id',
]

# (parent, child, relation)
ChildEdge = Tuple[str, str, str]


@dataclass
class TermCatalog:
    """Authoritative term dictionary plus the child-of edges between terms."""
    terms: Dict[str, Term]
    edges: List[ChildEdge] = field(default_factory=list)
    alt_ids: Dict[str, str] = field(default_factory=dict)

    def __contains__(self, term_id: str) -> bool:
        return term_id in self.terms

    def __len__(self) -> int:
        return len(self.terms)

    def get(self, term_id: str) -> Optional[Term]:
        return self.terms.get(self.canonical_id(term_id))

    def canonical_id(self, term_id: str) -> str:
        """Map a secondary (alt_id) identifier to its primary id."""
        return self.alt_ids.get(term_id, term_id)

    def texts(self, category: TermCategory) -> Dict[str, str]:
        """Term id -> display text for one category."""
        return {tid: t.name for tid, t in self.terms.items() if t.category == category}

    def child_edges(self, category: TermCategory) -> List[ChildEdge]:
        """Edges whose parent and child both belong to ``category``."""
        in_category = {tid for tid, t in self.terms.items() if t.category == category}
        return [e for e in self.edges if e[0] in in_category and e[1] in in_category]


@dataclass
class AnnotationSet:
    """Genes annotated to each term of one category, with evidence codes."""
    category: TermCategory
    term_to_genes: Dict[str, List[Tuple[str, str]]]
    source: Optional[str] = None

    def __contains__(self, term_id: str) -> bool:
        return term_id in self.term_to_genes

    def genes_for(self, term_id: str) -> List[Tuple[str, str]]:
        """(gene id, evidence code) pairs for a term; empty if unannotated."""
        return self.term_to_genes.get(term_id, [])

    @property
    def gene_ids(self) -> Set[str]:
        return {gene for pairs in self.term_to_genes.values() for gene, _ in pairs}

    @property
    def n_annotations(self) -> int:
        return sum(len(pairs) for pairs in self.term_to_genes.values())


def load_ontology(
    obo_path: str,
    relation_types: Iterable[str] = ("part_of",),
) -> TermCatalog:
    """
    Load an OBO ontology into a TermCatalog.

    Args:
        obo_path: Path to the OBO file (e.g. go-basic.obo)
        relation_types: Relationship types treated as child-of in addition
            to is_a (e.g. "part_of")

    Returns:
        TermCatalog with obsolete terms excluded

    Raises:
        ReferenceDataError: If the file is missing, unparsable, or holds no
            usable terms
    """
    path = Path(obo_path)
    if not path.exists():
        raise ReferenceDataError("ontology", str(path), "file not found")

    logger.info(f"Loading ontology from {path}")
    try:
        ontology = Ontology(str(path))
    except (OSError, ValueError, SyntaxError) as e:
        raise ReferenceDataError("ontology", str(path), str(e)) from e

    valid_categories = {c.value for c in TermCategory}
    relation_types = set(relation_types)
    terms: Dict[str, Term] = {}
    alt_ids: Dict[str, str] = {}
    raw_edges: List[ChildEdge] = []

    for term in ontology.terms():
        if term.obsolete or term.namespace not in valid_categories:
            continue
        terms[term.id] = Term(id=term.id, category=TermCategory(term.namespace), name=term.name or "")
        for alt in term.alternate_ids:
            alt_ids[alt] = term.id

        for parent in term.superclasses(distance=1, with_self=False):
            raw_edges.append((parent.id, term.id, "is_a"))
        for relationship, targets in term.relationships.items():
            if relationship.id not in relation_types:
                continue
            for parent in targets:
                raw_edges.append((parent.id, term.id, relationship.id))

    if not terms:
        raise ReferenceDataError("ontology", str(path), "no non-obsolete GO terms found")

    # Edges towards obsolete or foreign terms are dropped
    edges = [e for e in raw_edges if e[0] in terms and e[1] in terms]
    logger.info(f"Loaded {len(terms)} terms and {len(edges)} child-of edges")
    return TermCatalog(terms=terms, edges=edges, alt_ids=alt_ids)


def _normalize_taxon(taxon: str) -> str:
    taxon = str(taxon).strip()
    return taxon if taxon.startswith("taxon:") else f"taxon:{taxon}"


def read_gaf(gaf_path: str) -> pd.DataFrame:
    """
    Read a GAF 2.x file (plain or compressed) into a DataFrame of strings.

    Header lines (starting with '!') are removed; missing trailing columns are
    filled with empty strings.
    """
    path = Path(gaf_path)
    if not path.exists():
        raise ReferenceDataError("annotations", str(path), "file not found")

    logger.info(f"Reading annotations from {path}")
    try:
        df = pd.read_csv(
            path,
            sep='\t',
            header=None,
            names=GAF_COLUMNS,
            dtype=str,
            keep_default_na=False,
            quoting=csv.QUOTE_NONE,
            compression='infer',
            on_bad_lines='warn',
        )
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise ReferenceDataError("annotations", str(path), str(e)) from e

    df = df.fillna('')
    return df[~df['db'].str.startswith('!')].reset_index(drop=True)


def load_annotations(
    gaf_path: str,
    category: TermCategory,
    gene_id_column: str = "db_object_id",
    taxon: Optional[str] = None,
    excluded_evidence: Sequence[str] = (),
    catalog: Optional[TermCatalog] = None,
) -> AnnotationSet:
    """
    Build the term -> genes mapping for one category from a GAF file.

    Args:
        gaf_path: Path to the GAF file
        category: Category whose annotations are kept (matched on the aspect column)
        gene_id_column: "db_object_id", "db_object_symbol" or "synonym" (first
            synonym, e.g. the AGI locus code in TAIR files)
        taxon: Optional NCBI taxon id to keep (e.g. "3702")
        excluded_evidence: Evidence codes to drop (e.g. ["IEA"])
        catalog: When given, alternative term ids are mapped to primary ids

    Returns:
        AnnotationSet with one entry per distinct (gene, evidence) pair per term

    Raises:
        ReferenceDataError: If the file is missing or no annotation survives
            the filters
    """
    df = read_gaf(gaf_path)
    total = len(df)

    df = df[df['aspect'] == category.aspect]
    df = df[~df['qualifier'].str.split('|').apply(lambda parts: 'NOT' in parts)]
    if taxon:
        wanted = _normalize_taxon(taxon)
        df = df[df['taxon'].str.split('|').str[0] == wanted]
    if excluded_evidence:
        df = df[~df['evidence_code'].isin(list(excluded_evidence))]

    if gene_id_column == 'synonym':
        genes = df['db_object_synonym'].str.split('|').str[0].str.strip()
        fallback = genes == ''
        if fallback.any():
            logger.debug(f"{int(fallback.sum())} annotations have no synonym; using db_object_id")
        genes = genes.where(~fallback, df['db_object_id'])
    else:
        genes = df[gene_id_column]

    df = df.assign(gene_id=genes)
    df = df[df['gene_id'] != '']
    if catalog is not None:
        df = df.assign(go_id=df['go_id'].map(catalog.canonical_id))

    if df.empty:
        raise ReferenceDataError(
            "annotations", str(gaf_path),
            f"no usable {category.value} annotations out of {total} rows"
        )

    term_to_genes: Dict[str, List[Tuple[str, str]]] = defaultdict(list)
    for (term_id, gene_id, evidence), _ in df.groupby(['go_id', 'gene_id', 'evidence_code'], sort=True):
        term_to_genes[term_id].append((gene_id, evidence))

    annotations = AnnotationSet(category=category, term_to_genes=dict(term_to_genes), source=str(gaf_path))
    logger.info(
        f"Loaded {annotations.n_annotations} {category.value} annotations "
        f"for {len(annotations.term_to_genes)} terms and {len(annotations.gene_ids)} genes"
    )
    return annotations
