"""
Association statistics: table construction, deduplication and per-pathway
counts.
"""

import logging
from typing import Dict, Iterable, List

import pandas as pd

from ..models.data_models import GeneAssociation, GeneRecord

logger = logging.getLogger(__name__)

TABLE_COLUMNS = [
    'pathway_id', 'term_id', 'term_text', 'gene_id', 'evidence', 'secondary_id',
    'name', 'definition', 'aliases', 'chromosome', 'start', 'stop',
    'refseq_id', 'sequence',
]

# In-memory frames also carry the pathway key; the written table does not
FRAME_COLUMNS = TABLE_COLUMNS + ['pathway_key']

DEDUP_KEY = ['pathway_id', 'term_id', 'gene_id']

SUMMARY_COLUMNS = ['pathway_key', 'root_text', 'n_roots', 'n_terms', 'n_genes', 'n_rows', 'n_evidence_codes']


def attach_metadata(
    rows: Iterable[GeneAssociation],
    records: Dict[str, GeneRecord],
) -> List[GeneAssociation]:
    """Fill the metadata columns of each row from its secondary id's record."""
    return [row.with_metadata(records.get(row.secondary_id)) if row.secondary_id else row for row in rows]


def associations_to_frame(rows: Iterable[GeneAssociation]) -> pd.DataFrame:
    """
    Convert association rows to a DataFrame: the table columns in their fixed
    order, then the pathway key.

    Coordinates are kept as nullable integers so blanks survive.
    """
    df = pd.DataFrame([row.model_dump() for row in rows], columns=FRAME_COLUMNS)
    df['pathway_key'] = pathway_keys(df)
    for column in ('start', 'stop'):
        df[column] = df[column].astype('Int64')
    return df


def deduplicate_associations(df: pd.DataFrame) -> pd.DataFrame:
    """
    Collapse the table to one row per (pathway, term, gene).

    The first row of each group is kept. Blank gene ids form their own key, so
    an unannotated term still keeps its row.
    """
    deduplicated = df.drop_duplicates(subset=DEDUP_KEY, keep='first').reset_index(drop=True)
    logger.debug(f"Deduplicated {len(df)} rows to {len(deduplicated)}")
    return deduplicated


def pathway_keys(df: pd.DataFrame) -> pd.Series:
    """Pathway key of each row; tables read back from disk fall back to the root id."""
    if 'pathway_key' not in df.columns:
        return df['pathway_id']
    keys = df['pathway_key']
    return keys.where(keys.notna() & (keys != ''), df['pathway_id'])


def _per_pathway_rows(df: pd.DataFrame) -> pd.DataFrame:
    # multi-root pathways repeat every row once per root
    frame = df.assign(pathway_key=pathway_keys(df))
    return frame.drop_duplicates(subset=[c for c in frame.columns if c != 'pathway_id'])


def pathway_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-pathway counts of roots, terms, unique genes and annotation rows.

    A pathway with several roots is counted once under its joined key.

    Returns:
        DataFrame with columns pathway_key, root_text, n_roots, n_terms,
        n_genes, n_rows, n_evidence_codes, sorted by gene count
    """
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    keyed = df.assign(pathway_key=pathway_keys(df))
    roots = keyed[keyed['term_id'] == keyed['pathway_id']].sort_values('term_id')
    root_text = roots.groupby('pathway_key')['term_text'].agg(lambda texts: ' | '.join(dict.fromkeys(texts)))

    frame = _per_pathway_rows(df)
    genes = frame[frame['gene_id'].notna() & (frame['gene_id'] != '')]

    summary = frame.groupby('pathway_key').agg(
        n_terms=('term_id', 'nunique'),
        n_rows=('term_id', 'size'),
    )
    summary['n_roots'] = keyed.groupby('pathway_key')['pathway_id'].nunique()
    summary['n_genes'] = genes.groupby('pathway_key')['gene_id'].nunique()
    summary['n_evidence_codes'] = genes.groupby('pathway_key')['evidence'].nunique()
    summary = summary.fillna(0).astype(int)
    summary['root_text'] = root_text
    summary = summary.reset_index()[SUMMARY_COLUMNS]
    return summary.sort_values(['n_genes', 'pathway_key'], ascending=[False, True]).reset_index(drop=True)


def gene_sets_by_pathway(df: pd.DataFrame, label_column: str = 'name') -> Dict[str, set]:
    """
    Gene-name sets keyed by pathway key, used for the overlap diagram.

    Rows without a name fall back to the primary gene id.
    """
    labels = df[label_column].where(df[label_column].notna() & (df[label_column] != ''), df['gene_id'])
    frame = df.assign(_label=labels, _key=pathway_keys(df))
    frame = frame[frame['_label'].notna() & (frame['_label'] != '')]
    return {key: set(group['_label']) for key, group in frame.groupby('_key')}
