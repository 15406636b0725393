"""
NCBI E-utilities client.

Two read-only lookups, both keyed by stable identifiers and therefore safe to
retry:

- gene record by NCBI Gene id: ``efetch.fcgi?db=gene&rettype=gene_table&retmode=text``
- protein sequence by RefSeq accession: ``efetch.fcgi?db=protein&rettype=fasta``
"""

import logging
from typing import Any, Dict, Optional

import requests

from .base import HTTPClient
from ..core.config import NCBI_EUTILS_URL, NCBI_INTERVAL_NO_KEY
from ..core.retry import NCBI_RETRY_CONFIG, RetryConfig

logger = logging.getLogger(__name__)


class NCBIClient(HTTPClient):
    """NCBI E-utilities client for gene and protein records."""

    def __init__(
        self,
        base_url: str = NCBI_EUTILS_URL,
        api_key: Optional[str] = None,
        email: Optional[str] = None,
        tool: str = "phenogo",
        timeout: float = 30,
        min_interval: float = NCBI_INTERVAL_NO_KEY,
        retry_config: Optional[RetryConfig] = None,
        gene_rettype: str = "gene_table",
        session: Optional[requests.Session] = None,
    ):
        super().__init__(
            base_url=base_url,
            server_name="NCBI",
            timeout=timeout,
            min_interval=min_interval,
            retry_config=retry_config or NCBI_RETRY_CONFIG,
            session=session,
        )
        self.api_key = api_key
        self.email = email
        self.tool = tool
        self.gene_rettype = gene_rettype

    @classmethod
    def from_config(cls, config) -> "NCBIClient":
        """Build a client from a :class:`~phenogo.core.config.Config`."""
        return cls(
            base_url=config.ncbi_base_url,
            api_key=config.ncbi_api_key,
            email=config.ncbi_email,
            tool=config.ncbi_tool,
            timeout=config.request_timeout,
            min_interval=config.request_interval,
            retry_config=config.retry_config(),
        )

    def _params(self, **params: Any) -> Dict[str, Any]:
        params['tool'] = self.tool
        if self.email:
            params['email'] = self.email
        if self.api_key:
            params['api_key'] = self.api_key
        return params

    def fetch_gene_record(self, gene_id: str) -> str:
        """Free-text gene record for one NCBI Gene id."""
        params = self._params(db='gene', id=gene_id, rettype=self.gene_rettype, retmode='text')
        return self.get_text('efetch.fcgi', params, operation_name=f"efetch_gene_{gene_id}")

    def fetch_protein_sequence(self, accession: str) -> str:
        """FASTA text for one protein accession."""
        params = self._params(db='protein', id=accession, rettype='fasta', retmode='text')
        return self.get_text('efetch.fcgi', params, operation_name=f"efetch_protein_{accession}")
