"""
Unit tests for the sequential metadata lookup.
"""

from phenogo.core.exceptions import EmptyResultError
from phenogo.core.metadata_fetcher import MetadataFetcher


class TestFetchOne:

    def test_record_with_sequence(self, make_client):
        fetcher = MetadataFetcher(make_client(), progress=False)
        records, status = fetcher.fetch(["844348"])
        record = records["844348"]
        assert record.name == "TMM"
        assert record.sequence == "MLPPLFLLLLSSSAVTAQLD"
        assert status.partial == {}

    def test_sequence_failure_keeps_gene_fields(self, make_client):
        fetcher = MetadataFetcher(make_client(), progress=False)
        records, status = fetcher.fetch(["822012"])
        assert records["822012"].name == "FAMA"
        assert records["822012"].chromosome == "3"
        assert records["822012"].sequence is None
        assert "822012" in status.partial
        assert status.successful == 1

    def test_empty_response(self, make_client):
        fetcher = MetadataFetcher(make_client(records={"1": "   "}), progress=False)
        records, status = fetcher.fetch(["1"])
        assert records == {}
        assert status.failed == 1
        assert status.error_types == [EmptyResultError.__name__]

    def test_no_protein_lookup_without_accession(self, make_client):
        client = make_client(records={"7": "1. ABC\nsome protein [Arabidopsis thaliana]\n"})
        records, _ = MetadataFetcher(client, progress=False).fetch(["7"])
        assert records["7"].name == "ABC"
        assert client.protein_calls == []


class TestFetch:

    def test_failure_isolated(self, fake_client):
        records, status = MetadataFetcher(fake_client, progress=False).fetch(
            ["844348", "819785", "835402", "822012"]
        )
        assert set(records) == {"844348", "835402", "822012"}
        assert status.requested == 4
        assert status.successful == 3
        assert status.failed == 1
        assert "819785" in status.failures
        assert status.error_types == ["DatabaseTimeoutError"]

    def test_later_ids_still_fetched_after_failure(self, fake_client):
        MetadataFetcher(fake_client, progress=False).fetch(["819785", "844348"])
        assert fake_client.gene_calls == ["819785", "844348"]

    def test_duplicates_and_blanks_ignored(self, make_client):
        client = make_client()
        _, status = MetadataFetcher(client, progress=False).fetch(["844348", "844348", "", None])
        assert client.gene_calls == ["844348"]
        assert status.requested == 1

    def test_nothing_to_fetch(self, make_client):
        records, status = MetadataFetcher(make_client(), progress=False).fetch([])
        assert records == {}
        assert status.success_rate == 1.0
