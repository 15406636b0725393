"""
PhenoGO Pipeline Orchestrator

Runs the stages in dependency order, passing each stage's output to the next
explicitly:

    load references -> match keyword -> expand graph -> partition pathways
    -> resolve genes -> fetch metadata -> write report -> render figures

Only missing reference data or an invalid configuration abort a run. Remote
lookups degrade to blank fields, and figure failures are logged.
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .annotation_loader import load_annotations, load_ontology
from .association_stats import associations_to_frame, attach_metadata, deduplicate_associations
from .config import Config
from .exceptions import PhenoGOException, PipelineStageError, format_error_for_logging
from .gene_resolver import load_cross_reference, resolve_genes, secondary_ids, unmapped_genes
from .graph_expander import expand_terms
from .keyword_matcher import match_keyword
from .logging_config import get_run_id, log_with_context
from .metadata_fetcher import MetadataFetcher
from .pathway_partitioner import partition_pathways
from .report_writer import (
    read_chromosome_annotation,
    write_association_table,
    write_checksum,
    write_chromosome_annotation,
    write_pathway_summary,
    write_run_summary,
)
from ..clients.ncbi_client import NCBIClient
from ..models.data_models import FetchStatus, RunSummary, TermCategory

logger = logging.getLogger(__name__)

CHROMOSOME_FILE = 'chromosome_annotation.tsv'
PATHWAY_SUMMARY_FILE = 'pathway_summary.tsv'
RUN_SUMMARY_FILE = 'run_summary.json'
RUN_CONFIG_FILE = 'run_config.yaml'
FIGURES_DIR = 'figures'


class PhenotypePipeline:
    """
    Keyword -> GO pathway -> gene report pipeline.

    Args:
        config: Validated run configuration
        client: Remote gene database client; an NCBIClient built from the
            configuration is used (and closed) when omitted
        progress: Show the per-gene progress bar
        figure_style: Matplotlib style preset for the figures
    """

    def __init__(
        self,
        config: Config,
        client: Optional[Any] = None,
        progress: bool = True,
        figure_style: str = 'publication',
    ):
        self.config = config
        self.client = client
        self.progress = progress
        self.figure_style = figure_style
        self.stage_durations: Dict[str, float] = {}

    def _run_stage(self, stage: str, func: Callable, *args, **kwargs) -> Any:
        """
        Run one stage, timing it.

        PhenoGO exceptions propagate unchanged; anything else is wrapped in a
        PipelineStageError naming the stage.
        """
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        except PhenoGOException:
            raise
        except Exception as e:
            log_with_context(logger, "error", f"Stage {stage} failed", stage=stage, **format_error_for_logging(e))
            raise PipelineStageError(stage, e) from e
        finally:
            self.stage_durations[stage] = time.perf_counter() - start
            logger.debug(f"Stage {stage} took {self.stage_durations[stage]:.2f}s")

    def _fetch_metadata(self, ids):
        if not self.config.fetch_metadata or not ids:
            if ids:
                logger.info("Metadata lookup disabled; metadata columns left blank")
            return {}, None

        if self.client is not None:
            return MetadataFetcher(self.client, progress=self.progress).fetch(ids)

        with NCBIClient.from_config(self.config) as client:
            return MetadataFetcher(client, progress=self.progress).fetch(ids)

    def _render_figures(self, expansion, partition, table, located, figures_dir: Path):
        # Imported here so runs without figures never load the plotting stack
        from ..visualization import ReportVisualizer

        return ReportVisualizer(self.figure_style).visualize(
            expansion.graph,
            partition.root_ids,
            table,
            located,
            figures_dir,
            keyword=self.config.keyword,
        )

    def run(self) -> RunSummary:
        """
        Execute the whole pipeline.

        Returns:
            RunSummary (also written to ``run_summary.json``)

        Raises:
            ConfigurationError: Required inputs are not configured
            ReferenceDataError: Ontology, annotations or cross-reference unusable
            PipelineStageError: Unexpected failure inside a stage
        """
        config = self.config
        config.validate_for_run()

        run_id = get_run_id()
        category = TermCategory(config.category)
        output_dir = Path(config.output_dir)

        log_with_context(
            logger, "info", "pipeline_started",
            run_id=run_id, keyword=config.keyword, category=category.value,
        )
        start_time = time.perf_counter()

        # Reference data
        catalog = self._run_stage(
            "load_ontology", load_ontology, config.obo_path, relation_types=config.relation_types
        )
        annotations = self._run_stage(
            "load_annotations", load_annotations,
            config.gaf_path, category,
            gene_id_column=config.gene_id_column,
            taxon=config.taxon,
            excluded_evidence=config.excluded_evidence,
            catalog=catalog,
        )
        xref = None
        if config.xref_path:
            xref = self._run_stage(
                "load_cross_reference", load_cross_reference,
                config.xref_path, config.xref_primary_column, config.xref_secondary_column,
            )
        else:
            logger.warning("No cross-reference table configured; secondary ids will be blank")

        output_dir.mkdir(parents=True, exist_ok=True)

        # Terms and pathways
        term_texts = catalog.texts(category)
        candidates = self._run_stage("match_keyword", match_keyword, term_texts, config.keyword)
        expansion = self._run_stage(
            "expand_terms", expand_terms,
            candidates, catalog.child_edges(category), annotations,
            {tid: term.name for tid, term in catalog.terms.items()},
            include_ancestors=bool(config.include_ancestors),
        )
        partition = self._run_stage("partition_pathways", partition_pathways, expansion.graph)

        # Genes
        rows = self._run_stage("resolve_genes", resolve_genes, partition, expansion, annotations, xref)
        records, fetch_status = self._run_stage("fetch_metadata", self._fetch_metadata, secondary_ids(rows))
        rows = attach_metadata(rows, records)
        table = associations_to_frame(rows)

        # Report
        outputs: Dict[str, str] = {}
        table_path = self._run_stage("write_table", write_association_table, table, config.table_path)
        checksum, checksum_path = self._run_stage(
            "write_checksum", write_checksum, table_path, config.checksum_algorithm
        )
        outputs['table'] = str(table_path)
        outputs['checksum'] = str(checksum_path)
        chromosome_path = self._run_stage(
            "write_chromosome_annotation", write_chromosome_annotation, table, output_dir / CHROMOSOME_FILE
        )
        outputs['chromosome_annotation'] = str(chromosome_path)
        located = read_chromosome_annotation(chromosome_path)
        outputs['pathway_summary'] = str(self._run_stage(
            "write_pathway_summary", write_pathway_summary, table, output_dir / PATHWAY_SUMMARY_FILE
        ))

        if config.render_figures:
            figures_dir = output_dir / FIGURES_DIR
            figures = self._run_stage(
                "render_figures", self._render_figures, expansion, partition, table, located, figures_dir
            )
            for path in figures:
                outputs[f"figure:{Path(path).name}"] = str(path)

        config.save_to_file(str(output_dir / RUN_CONFIG_FILE))
        outputs['run_config'] = str(output_dir / RUN_CONFIG_FILE)
        outputs['run_summary'] = str(output_dir / RUN_SUMMARY_FILE)

        summary = RunSummary(
            run_id=run_id,
            keyword=config.keyword,
            category=category,
            matched_terms=len(candidates),
            expanded_terms=expansion.graph.number_of_nodes(),
            recovered_terms=expansion.recovered,
            unannotated_terms=expansion.unannotated,
            skipped_terms=expansion.skipped,
            pathways=len(partition.pathways),
            multi_root_pathways=[p.key for p in partition.multi_root],
            associations=len(table),
            unique_associations=len(deduplicate_associations(table)),
            genes_without_secondary_id=unmapped_genes(rows),
            fetch_status=fetch_status if isinstance(fetch_status, FetchStatus) else None,
            checksum=checksum,
            outputs=outputs,
        )
        write_run_summary(summary, output_dir / RUN_SUMMARY_FILE)

        log_with_context(
            logger, "info", "pipeline_completed",
            run_id=run_id,
            duration=round(time.perf_counter() - start_time, 2),
            pathways=summary.pathways,
            associations=summary.associations,
        )
        return summary
