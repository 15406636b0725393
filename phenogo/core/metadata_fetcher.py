"""
Metadata Fetcher

Looks up every resolved secondary (NCBI Gene) id, one request at a time, and
parses the responses into GeneRecords. Failures are per id: the id is recorded
in the FetchStatus and the loop moves on, so a slow or failing lookup never
touches records already collected.
"""

import logging
from typing import Dict, Iterable, Tuple

from tqdm.auto import tqdm

from .exceptions import EmptyResultError, PhenoGOException, format_error_for_logging
from .logging_config import log_with_context
from .record_parser import parse_fasta, parse_gene_record
from ..models.data_models import FetchStatus, GeneRecord

logger = logging.getLogger(__name__)


class MetadataFetcher:
    """
    Sequential gene metadata lookup.

    The client must provide ``fetch_gene_record(gene_id) -> str`` and
    ``fetch_protein_sequence(accession) -> str`` (see NCBIClient).
    """

    def __init__(self, client, progress: bool = True, source_name: str = "NCBI"):
        self.client = client
        self.progress = progress
        self.source_name = source_name

    def fetch_one(self, gene_id: str, status: FetchStatus) -> GeneRecord:
        """
        Fetch and parse one gene, then its protein sequence.

        A failing sequence lookup is recorded in ``status.partial`` and the
        gene record is returned without a sequence.
        """
        text = self.client.fetch_gene_record(gene_id)
        if not text.strip():
            raise EmptyResultError("gene_record", gene_id)
        record = parse_gene_record(text)

        if record.refseq_id:
            try:
                fasta = self.client.fetch_protein_sequence(record.refseq_id)
                record = record.model_copy(update={'sequence': parse_fasta(fasta, record.refseq_id)})
            except PhenoGOException as e:
                status.partial[gene_id] = str(e)
                log_with_context(
                    logger, "warning",
                    f"Sequence lookup failed for {gene_id} ({record.refseq_id}); keeping gene fields",
                    gene_id=gene_id, **format_error_for_logging(e)
                )
        return record

    def fetch(self, gene_ids: Iterable[str]) -> Tuple[Dict[str, GeneRecord], FetchStatus]:
        """
        Fetch metadata for every unique id.

        Args:
            gene_ids: Secondary gene ids; duplicates and blanks are ignored

        Returns:
            (id -> GeneRecord for the ids that succeeded, FetchStatus)
        """
        unique_ids = sorted({g for g in gene_ids if g})
        status = FetchStatus(source_name=self.source_name, requested=len(unique_ids))
        records: Dict[str, GeneRecord] = {}

        logger.info(f"Fetching {self.source_name} metadata for {len(unique_ids)} genes")
        for gene_id in tqdm(unique_ids, desc=f"{self.source_name} lookups", unit="gene",
                            disable=not self.progress):
            try:
                record = self.fetch_one(gene_id, status)
            except PhenoGOException as e:
                status.record_failure(gene_id, e)
                log_with_context(
                    logger, "warning",
                    f"No metadata for {gene_id}: {e}",
                    gene_id=gene_id, **format_error_for_logging(e)
                )
                continue
            records[gene_id] = record
            status.successful += 1

        logger.info(
            f"{self.source_name} metadata: {status.successful}/{status.requested} genes "
            f"({status.success_rate:.0%}), {len(status.partial)} without sequence"
        )
        return records, status
