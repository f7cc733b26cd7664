"""
Posting Ledger Tests
====================

SQLite ledger of already shared URLs.
"""

import pytest

from storycurator.models.content import ContentCategory
from storycurator.storage.posting_ledger import SQLitePostingLedger


@pytest.fixture
def ledger(tmp_path):
    return SQLitePostingLedger(str(tmp_path / "data" / "ledger.db"))


class TestSQLitePostingLedger:
    """Test suite for SQLitePostingLedger."""

    def test_empty_ledger(self, ledger):
        assert ledger.shared_urls(ContentCategory.TECH_NEWS, "C1") == set()

    def test_mark_and_read_back(self, ledger):
        inserted = ledger.mark_shared(ContentCategory.TECH_NEWS, "C1",
                                      ["https://a.example.com", "https://b.example.com"], "1712.01")

        assert inserted == 2
        assert ledger.shared_urls("tech_news", "C1") == {"https://a.example.com", "https://b.example.com"}

    def test_scoped_by_channel_and_category(self, ledger):
        ledger.mark_shared("tech_news", "C1", ["https://a.example.com"], None)

        assert ledger.shared_urls("tech_news", "C2") == set()
        assert ledger.shared_urls("learning_resources", "C1") == set()

    def test_repeat_marks_ignored(self, ledger):
        ledger.mark_shared("tech_news", "C1", ["https://a.example.com"], "1")
        inserted = ledger.mark_shared("tech_news", "C1", ["https://a.example.com", "https://c.example.com"], "2")

        assert inserted == 1
        records = ledger.history("C1")
        assert {record.url: record.message_ref for record in records} == {
            "https://a.example.com": "1",
            "https://c.example.com": "2",
        }

    def test_history_newest_first_and_limited(self, ledger):
        ledger.mark_shared("tech_news", "C1", ["https://a.example.com"], "1")
        ledger.mark_shared("job_listings", "C1", ["https://b.example.com"], "2")

        records = ledger.history("C1", limit=1)

        assert len(records) == 1
        assert records[0].url == "https://b.example.com"
        assert records[0].category == "job_listings"
        assert records[0].shared_at.tzinfo is not None

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "ledger.db")
        SQLitePostingLedger(path).mark_shared("tech_news", "C1", ["https://a.example.com"], "1")

        assert SQLitePostingLedger(path).shared_urls("tech_news", "C1") == {"https://a.example.com"}
