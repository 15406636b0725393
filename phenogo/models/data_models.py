"""
Pydantic Data Models

Data models passed between the pipeline stages and written to the run summary.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


class TermCategory(str, Enum):
    """GO namespaces."""
    BIOLOGICAL_PROCESS = "biological_process"
    MOLECULAR_FUNCTION = "molecular_function"
    CELLULAR_COMPONENT = "cellular_component"

    @property
    def aspect(self) -> str:
        """Single-letter aspect code used in GAF column 9."""
        return {
            TermCategory.BIOLOGICAL_PROCESS: "P",
            TermCategory.MOLECULAR_FUNCTION: "F",
            TermCategory.CELLULAR_COMPONENT: "C",
        }[self]


class Term(BaseModel):
    """Ontology term."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Term identifier (e.g. GO:0010374)")
    category: TermCategory = Field(..., description="Ontology namespace")
    name: str = Field(..., description="Human-readable term text")


class Pathway(BaseModel):
    """Weakly connected component of the expanded term graph."""
    model_config = ConfigDict(frozen=True)

    roots: Tuple[str, ...] = Field(..., min_length=1, description="Root term ids, sorted")
    terms: Tuple[str, ...] = Field(..., min_length=1, description="Member term ids, sorted")

    @property
    def key(self) -> str:
        """Pathway key; several roots are joined with '|'."""
        return "|".join(self.roots)

    @property
    def is_multi_root(self) -> bool:
        return len(self.roots) > 1


class GeneRecord(BaseModel):
    """Metadata parsed from a remote gene record. Every field may be missing."""
    name: Optional[str] = Field(None, description="Official symbol or display name")
    definition: Optional[str] = Field(None, description="One-line full name")
    aliases: List[str] = Field(default_factory=list, description="Other aliases")
    chromosome: Optional[str] = Field(None, description="Chromosome label")
    start: Optional[int] = Field(None, ge=0, description="Start coordinate (1-based)")
    stop: Optional[int] = Field(None, ge=0, description="Stop coordinate (1-based)")
    refseq_id: Optional[str] = Field(None, description="Representative RefSeq protein accession")
    sequence: Optional[str] = Field(None, description="Amino-acid sequence")


class GeneAssociation(BaseModel):
    """One row of the output table."""
    pathway_id: str = Field(..., description="Root term id of the term's pathway")
    term_id: str = Field(..., description="Term identifier")
    term_text: str = Field(..., description="Term display text")
    gene_id: Optional[str] = Field(None, description="Organism (primary) gene id")
    evidence: Optional[str] = Field(None, description="GO evidence code")
    secondary_id: Optional[str] = Field(None, description="Cross-referenced (NCBI) gene id")
    name: Optional[str] = None
    definition: Optional[str] = None
    aliases: Optional[str] = Field(None, description="Aliases joined with ', '")
    chromosome: Optional[str] = None
    start: Optional[int] = None
    stop: Optional[int] = None
    refseq_id: Optional[str] = None
    sequence: Optional[str] = None
    pathway_key: Optional[str] = Field(
        None, description="Key of the whole pathway (roots joined with '|'); pathway_id when unset"
    )

    def with_metadata(self, record: Optional[GeneRecord]) -> "GeneAssociation":
        """Return a copy carrying the fields of ``record``."""
        if record is None:
            return self
        return self.model_copy(update={
            'name': record.name,
            'definition': record.definition,
            'aliases': ", ".join(record.aliases) if record.aliases else None,
            'chromosome': record.chromosome,
            'start': record.start,
            'stop': record.stop,
            'refseq_id': record.refseq_id,
            'sequence': record.sequence,
        })


class FetchStatus(BaseModel):
    """Track remote source completeness and failures."""
    source_name: str = Field(..., description="Remote database name")
    requested: int = Field(0, ge=0, description="Number of ids looked up")
    successful: int = Field(0, ge=0, description="Number of ids fetched")
    failed: int = Field(0, ge=0, description="Number of ids left without metadata")
    error_types: List[str] = Field(default_factory=list, description="Types of errors encountered")
    failures: Dict[str, str] = Field(default_factory=dict, description="Failed id -> reason")
    partial: Dict[str, str] = Field(
        default_factory=dict,
        description="Ids whose gene record was fetched but whose sequence lookup failed"
    )

    @property
    def success_rate(self) -> float:
        if self.requested == 0:
            return 1.0
        return self.successful / self.requested

    def record_failure(self, identifier: str, error: Exception) -> None:
        self.failed += 1
        self.failures[identifier] = str(error)
        error_type = type(error).__name__
        if error_type not in self.error_types:
            self.error_types.append(error_type)


class RunSummary(BaseModel):
    """Summary of one pipeline run, written next to the table."""
    run_id: str
    keyword: str
    category: TermCategory
    matched_terms: int = Field(0, ge=0)
    expanded_terms: int = Field(0, ge=0)
    recovered_terms: List[str] = Field(default_factory=list)
    unannotated_terms: List[str] = Field(default_factory=list)
    skipped_terms: List[str] = Field(default_factory=list)
    pathways: int = Field(0, ge=0)
    multi_root_pathways: List[str] = Field(default_factory=list)
    associations: int = Field(0, ge=0)
    unique_associations: int = Field(0, ge=0)
    genes_without_secondary_id: List[str] = Field(default_factory=list)
    fetch_status: Optional[FetchStatus] = None
    checksum: Optional[str] = None
    outputs: Dict[str, str] = Field(default_factory=dict, description="Output kind -> path")
