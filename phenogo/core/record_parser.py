"""
Record Parser

Tolerant parsing of the free-text records returned by NCBI E-utilities.

Each field is located independently; a field that cannot be found is left as
``None`` and never prevents the other fields from being read. The default
``rettype=gene_table`` layout::

    TMM Leucine-rich repeat (LRR) family protein [Arabidopsis thaliana]
    Gene ID: 844348, updated on 2-Jun-2024

    Reference TAIR10.1 Primary Assembly
    Chromosome 1 NC_003070.9 (30112345..30114100, complement)

    Exon table for  mRNA NM_106657.3 and protein NP_177860.1
    ...
    30114100-30113021    30113950-30113021    1-1080    151-1080    1080 ...

is understood, with the location taken from the interval line, a
``from: N to: M`` range or, failing both, the span of the exon rows. The
summary text layout (``1. TMM`` heading, ``Annotation:`` line) and the
``Official Symbol: X and Name: Y [organism]`` layout are read as well.
"""

import logging
import re
from typing import List, Optional, Tuple

from .exceptions import RecordParseError
from ..models.data_models import GeneRecord

logger = logging.getLogger(__name__)

OFFICIAL_NAME_RE = re.compile(r'Official Symbol:\s*(\S+)\s+and Name:\s*(.+?)\s*(?:\[[^\]]*\]\s*)?$', re.MULTILINE)
NUMBERED_HEADING_RE = re.compile(r'^\s*\d+[.:]\s+(\S+)\s*$', re.MULTILINE)
TABLE_HEADING_RE = re.compile(r'^\s*(\S+)(?:\s+(.+?))?\s+\[[^\]]+\]\s*$')
ORGANISM_SUFFIX_RE = re.compile(r'\s*\[[^\]]*\]\s*$')
ALIASES_RE = re.compile(r'Other Aliases:\s*(.+)')
ANNOTATION_RE = re.compile(
    r'Annotation:\s*(?:Chromosome\s+)?(\S+?)[,;]?\s+\S+\s+\((\d+)\.\.(\d+)(?:,\s*complement)?\)'
)
GENOMIC_INTERVAL_RE = re.compile(
    r'Chromosome\s+(\S+?)[,;]?\s+[A-Z]{2}_\d+(?:\.\d+)?\s+\((\d+)\.\.(\d+)(?:,\s*complement)?\)'
)
FROM_TO_RE = re.compile(r'\bfrom:\s*(\d+)\s+to:\s*(\d+)')
EXON_TABLE_RE = re.compile(r'^\s*Exon table\b', re.MULTILINE)
EXON_INTERVAL_RE = re.compile(r'^\s*(\d+)-(\d+)\b', re.MULTILINE)
CHROMOSOME_RE = re.compile(r'Chromosome:\s*([^;\n]+)')
CHROMOSOME_LABEL_RE = re.compile(r'\bChromosome\s+([A-Za-z0-9]+)\b')
REFSEQ_PROTEIN_RE = re.compile(r'\b([NXY]P_\d+\.\d+)\b')
LABELLED_LINE_RE = re.compile(r'^[A-Za-z][A-Za-z ]*:')


def parse_name_and_definition(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Symbol and one-line full name."""
    match = OFFICIAL_NAME_RE.search(text)
    if match:
        return match.group(1), match.group(2).strip() or None

    match = NUMBERED_HEADING_RE.search(text)
    if match:
        following = text[match.end():].lstrip('\n').split('\n', 1)[0]
        definition = ORGANISM_SUFFIX_RE.sub('', following).strip()
        if LABELLED_LINE_RE.match(definition):
            definition = ''
        return match.group(1), definition or None

    # gene_table: the first line is "<symbol> <full name> [<organism>]"
    first_line = text.strip().split('\n', 1)[0]
    match = TABLE_HEADING_RE.match(first_line)
    if match:
        definition = (match.group(2) or '').strip()
        return match.group(1), definition or None

    return None, None


def parse_aliases(text: str) -> List[str]:
    match = ALIASES_RE.search(text)
    if not match:
        return []
    return [alias.strip() for alias in match.group(1).split(',') if alias.strip()]


def _chromosome_label(text: str) -> Optional[str]:
    for pattern in (CHROMOSOME_RE, CHROMOSOME_LABEL_RE):
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def _exon_span(text: str) -> Tuple[Optional[int], Optional[int]]:
    """Lowest and highest genomic coordinate of the exon rows."""
    table = EXON_TABLE_RE.search(text)
    if not table:
        return None, None
    coordinates = [int(value) for pair in EXON_INTERVAL_RE.findall(text, table.end()) for value in pair]
    if not coordinates:
        return None, None
    return min(coordinates), max(coordinates)


def parse_location(text: str) -> Tuple[Optional[str], Optional[int], Optional[int]]:
    """Chromosome label with start/stop coordinates when annotated."""
    for pattern in (ANNOTATION_RE, GENOMIC_INTERVAL_RE):
        match = pattern.search(text)
        if match:
            return match.group(1), int(match.group(2)), int(match.group(3))

    chromosome = _chromosome_label(text)
    match = FROM_TO_RE.search(text)
    if match:
        bounds = sorted((int(match.group(1)), int(match.group(2))))
        return chromosome, bounds[0], bounds[1]

    start, stop = _exon_span(text)
    return chromosome, start, stop

def parse_refseq_protein(text: str) -> Optional[str]:
    """First RefSeq protein accession (NP_, XP_ or YP_) mentioned in the record."""
    match = REFSEQ_PROTEIN_RE.search(text)
    return match.group(1) if match else None


def parse_gene_record(text: str) -> GeneRecord:
    """
    Parse one gene record into a GeneRecord.

    Args:
        text: Raw text returned by efetch for a single gene id

    Returns:
        GeneRecord; unlocated fields are None (aliases empty)
    """
    name, definition = parse_name_and_definition(text)
    chromosome, start, stop = parse_location(text)
    record = GeneRecord(
        name=name,
        definition=definition,
        aliases=parse_aliases(text),
        chromosome=chromosome,
        start=start,
        stop=stop,
        refseq_id=parse_refseq_protein(text),
    )
    missing = [field for field, value in record.model_dump(exclude={'sequence', 'aliases'}).items() if value is None]
    if missing:
        logger.debug(f"Gene record without {', '.join(missing)}")
    return record


def parse_fasta(text: str, identifier: str) -> str:
    """
    Return the sequence of the first FASTA record in ``text``.

    Raises:
        RecordParseError: If the payload holds no sequence
    """
    sequence_lines = []
    seen_header = False
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        if line.startswith('>'):
            if seen_header:
                break
            seen_header = True
            continue
        sequence_lines.append(line)

    sequence = ''.join(sequence_lines)
    if not sequence:
        raise RecordParseError('fasta', identifier, 'no sequence in response')
    return sequence
