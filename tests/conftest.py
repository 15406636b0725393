"""
Shared fixtures: a small GO ontology, a TAIR-style GAF, an NCBI gene_info
cross-reference and a fake NCBI client.

Fixture ontology (biological_process, edges parent -> child)::

    GO:0008150 biological_process
    |-- GO:0010374 stomatal complex development
    |   |-- GO:0010375 stomatal complex patterning          (is_a)
    |   `-- GO:0010103 stomatal complex morphogenesis       (part_of)
    |       `-- GO:0010052 guard cell differentiation       (part_of)
    `-- GO:0010119 regulation of stomatal movement
        `-- GO:0090333 regulation of stomatal closure       (is_a)

The keyword "stomatal" matches every term above except GO:0010052 and the
category root, giving two pathways rooted at GO:0010374 and GO:0010119.
"""

import matplotlib

matplotlib.use("Agg")

from typing import Dict  # noqa: E402

import pytest  # noqa: E402

from phenogo.core.annotation_loader import load_annotations, load_ontology  # noqa: E402
from phenogo.core.config import Config  # noqa: E402
from phenogo.core.exceptions import DatabaseTimeoutError, RemoteServiceError  # noqa: E402
from phenogo.models.data_models import TermCategory  # noqa: E402


OBO_TEXT = """format-version: 1.2
ontology: go

[Term]
id: GO:0008150
name: biological_process
namespace: biological_process

[Term]
id: GO:0010374
name: stomatal complex development
namespace: biological_process
alt_id: GO:0010999
is_a: GO:0008150 ! biological_process

[Term]
id: GO:0010375
name: stomatal complex patterning
namespace: biological_process
is_a: GO:0010374 ! stomatal complex development

[Term]
id: GO:0010103
name: stomatal complex morphogenesis
namespace: biological_process
is_a: GO:0008150 ! biological_process
relationship: part_of GO:0010374 ! stomatal complex development

[Term]
id: GO:0010052
name: guard cell differentiation
namespace: biological_process
is_a: GO:0008150 ! biological_process
relationship: part_of GO:0010103 ! stomatal complex morphogenesis

[Term]
id: GO:0010119
name: regulation of stomatal movement
namespace: biological_process
is_a: GO:0008150 ! biological_process

[Term]
id: GO:0090333
name: regulation of stomatal closure
namespace: biological_process
is_a: GO:0010119 ! regulation of stomatal movement

[Term]
id: GO:0009737
name: response to abscisic acid
namespace: biological_process
is_a: GO:0008150 ! biological_process

[Term]
id: GO:0003674
name: molecular_function
namespace: molecular_function

[Term]
id: GO:0005515
name: protein binding
namespace: molecular_function
is_a: GO:0003674 ! molecular_function

[Term]
id: GO:0000001
name: obsolete stomatal opening
namespace: biological_process
is_obsolete: true

[Typedef]
id: part_of
name: part of
is_transitive: true
"""


def _gaf_row(gene, symbol, go_id, evidence, aspect="P", qualifier="involved_in",
             taxon="taxon:3702", synonym=None):
    return "\t".join([
        "TAIR", gene, symbol, qualifier, go_id, "TAIR:Publication:1", evidence, "",
        aspect, f"{symbol} protein", synonym if synonym is not None else f"{gene}|{symbol}",
        "protein", taxon, "20200101", "TAIR", "", "",
    ])


GAF_ROWS = [
    _gaf_row("AT1G80080", "TMM", "GO:0010375", "IMP"),
    _gaf_row("AT1G80080", "TMM", "GO:0010375", "IEP"),
    _gaf_row("AT5G53210", "SPCH", "GO:0010374", "IMP"),
    _gaf_row("AT3G06120", "MUTE", "GO:0010052", "IMP"),
    _gaf_row("AT3G24140", "FAMA", "GO:0010052", "IDA"),
    _gaf_row("AT4G33950", "OST1", "GO:0090333", "IDA"),
    _gaf_row("AT2G26330", "ER", "GO:0010374", "IMP", qualifier="NOT|involved_in"),
    _gaf_row("AT1G80080", "TMM", "GO:0005515", "IPI", aspect="F", qualifier="enables"),
    _gaf_row("HS0001", "HSG", "GO:0010374", "IEA", taxon="taxon:9606"),
]

GAF_TEXT = "!gaf-version: 2.2\n!generated-by: TAIR\n" + "\n".join(GAF_ROWS) + "\n"

XREF_TEXT = (
    "#tax_id\tGeneID\tSymbol\tLocusTag\n"
    "3702\t844348\tTMM\tAT1G80080\n"
    "3702\t835402\tSPCH\tAT5G53210\n"
    "3702\t819785\tMUTE\tAT3G06120\n"
    "3702\t822012\tFAMA\tAT3G24140\n"
    "3702\t817174\tER\t-\n"
)

EXON_HEADER = (
    "      Genomic Interval Exon     Genomic Interval Coding     Gene Interval Exon     "
    "Gene Interval Coding     Exon Length     Coding Length     Intron Length\n"
    + "-" * 150 + "\n"
)

# efetch db=gene rettype=gene_table retmode=text
GENE_RECORDS: Dict[str, str] = {
    "844348": (
        "TMM Leucine-rich repeat (LRR) family protein [Arabidopsis thaliana]\n"
        "Gene ID: 844348, updated on 2-Jun-2024\n\n"
        "Reference TAIR10.1 Primary Assembly\n"
        "Chromosome 1 NC_003070.9 (30112345..30114100, complement)\n\n"
        "Exon table for  mRNA NM_106657.3 and protein NP_177860.1\n"
        + EXON_HEADER +
        "30114100-30112345         30113950-30112480           1-1756                 "
        "151-1621                 1756            1470\n"
    ),
    "835402": (
        "SPCH basic helix-loop-helix (bHLH) DNA-binding superfamily protein [Arabidopsis thaliana]\n"
        "Gene ID: 835402, updated on 2-Jun-2024\n\n"
        "Reference TAIR10.1 Primary Assembly NC_003076.8 Chromosome 5 from: 21589103 to: 21591201\n\n"
        "Exon table for  mRNA NM_124700.4 and protein NP_200133.2\n"
        + EXON_HEADER +
        "21589103-21589540         21589210-21589540           1-438                  "
        "108-438                  438             331             471\n"
        "21590012-21591201         21590012-21590950           910-2099               "
        "910-1848                 1190            939\n"
    ),
    "822012": (
        "FAMA basic helix-loop-helix (bHLH) DNA-binding superfamily protein [Arabidopsis thaliana]\n"
        "Gene ID: 822012, updated on 2-Jun-2024\n\n"
        "Reference TAIR10.1 Primary Assembly Chromosome 3\n\n"
        "Exon table for  mRNA NM_113400.4 and protein NP_189057.1\n"
        + EXON_HEADER +
        "8804513-8805100           8804620-8805100             1-588                  "
        "108-588                  588             481             119\n"
        "8805220-8805610           8805220-8805610             708-1098               "
        "708-1098                 391             391             89\n"
        "8805700-8806570           8805700-8806310             1188-2058              "
        "1188-1798                871             611\n"
    ),
}


PROTEIN_SEQUENCES = {
    "NP_177860.1": ">NP_177860.1 TMM [Arabidopsis thaliana]\nMLPPLFLLLL\nSSSAVTAQLD\n",
    "NP_200133.2": ">NP_200133.2 SPCH [Arabidopsis thaliana]\nMQEIIPDFLE\n",
}


class FakeNCBIClient:
    """Stands in for NCBIClient; records every call."""

    def __init__(self, records=None, sequences=None, failing_genes=(), failing_proteins=()):
        self.records = GENE_RECORDS if records is None else records
        self.sequences = PROTEIN_SEQUENCES if sequences is None else sequences
        self.failing_genes = set(failing_genes)
        self.failing_proteins = set(failing_proteins)
        self.gene_calls = []
        self.protein_calls = []

    def fetch_gene_record(self, gene_id: str) -> str:
        self.gene_calls.append(gene_id)
        if gene_id in self.failing_genes:
            raise DatabaseTimeoutError("NCBI", 5.0, f"efetch.fcgi {gene_id}")
        return self.records.get(gene_id, "")

    def fetch_protein_sequence(self, accession: str) -> str:
        self.protein_calls.append(accession)
        if accession in self.failing_proteins or accession not in self.sequences:
            raise RemoteServiceError("NCBI", 400, "Invalid uid", "efetch.fcgi")
        return self.sequences[accession]


@pytest.fixture
def obo_file(tmp_path):
    path = tmp_path / "go-mini.obo"
    path.write_text(OBO_TEXT)
    return path


@pytest.fixture
def gaf_file(tmp_path):
    path = tmp_path / "tair-mini.gaf"
    path.write_text(GAF_TEXT)
    return path


@pytest.fixture
def xref_file(tmp_path):
    path = tmp_path / "Arabidopsis_thaliana.gene_info"
    path.write_text(XREF_TEXT)
    return path


@pytest.fixture
def catalog(obo_file):
    return load_ontology(str(obo_file), relation_types=["part_of"])


@pytest.fixture
def annotations(gaf_file, catalog):
    return load_annotations(str(gaf_file), TermCategory.BIOLOGICAL_PROCESS, taxon="3702", catalog=catalog)


@pytest.fixture
def fake_client():
    """MUTE (819785) times out; FAMA's protein (NP_189057.1) is unknown."""
    return FakeNCBIClient(failing_genes={"819785"})


@pytest.fixture
def run_config(tmp_path, obo_file, gaf_file, xref_file):
    return Config(env="testing", overrides={
        "keyword": "stomatal",
        "obo_path": str(obo_file),
        "gaf_path": str(gaf_file),
        "xref_path": str(xref_file),
        "taxon": "3702",
        "output_dir": str(tmp_path / "results"),
    })


@pytest.fixture
def gaf_text():
    return GAF_TEXT


@pytest.fixture
def gene_records():
    return dict(GENE_RECORDS)


@pytest.fixture
def make_client():
    """Factory for FakeNCBIClient with custom records or failures."""
    return FakeNCBIClient
