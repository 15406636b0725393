"""
PhenoGO - phenotype keyword to Gene Ontology pathway gene reports

Matches a phenotype keyword against Gene Ontology term names, expands the
matches through the ontology graph, groups them into pathways, resolves the
annotated genes and their NCBI metadata, and writes a checksummed table with
supporting figures.
"""

__version__ = "0.1.0"
