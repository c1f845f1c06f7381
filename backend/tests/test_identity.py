from jobtracker.schemas.job import JobResult
from jobtracker.utils.identity import dedupe, identity_of, merge_unique


def _job(**kwargs) -> JobResult:
    return JobResult(**kwargs)


class TestIdentity:
    def test_external_id_wins(self):
        job = _job(hash_id="  abc-123 ", detail_url="https://example.com/1", employer="Acme")
        assert identity_of(job) == "abc-123"

    def test_detail_link_when_no_id(self):
        job = _job(hash_id="   ", detail_url=" https://example.com/1 ", employer="Acme")
        assert identity_of(job) == "https://example.com/1"

    def test_composite_is_lowercased(self):
        job = _job(employer="ACME GmbH", title="Verkäufer", location="Berlin")
        assert identity_of(job) == "acme gmbh|verkäufer|berlin"

    def test_composite_with_missing_employer(self):
        job = _job(title="Koch", location="Hamburg")
        assert identity_of(job) == "|koch|hamburg"

    def test_blank_composite_is_empty(self):
        assert identity_of(_job(title="  ", employer="", location="")) == ""


class TestDedupe:
    def test_keeps_first_occurrence_in_order(self):
        a1 = _job(hash_id="a", title="first a")
        b = _job(hash_id="b")
        a2 = _job(hash_id="a", title="second a")
        c = _job(detail_url="https://example.com/c")

        out = dedupe([a1, b, a2, c, b])
        assert out == [a1, b, c]
        assert out[0].title == "first a"

    def test_repeated_key_shrinks_output(self):
        jobs = [_job(hash_id="x"), _job(hash_id="y"), _job(hash_id="x")]
        assert len(dedupe(jobs)) < len(jobs)

    def test_empty_keys_never_collapse(self):
        blanks = [_job(), _job(title=""), _job(location="  ")]
        assert dedupe(blanks) == blanks

    def test_composite_duplicates_removed(self):
        one = _job(employer="Acme", title="Dev", location="Köln")
        two = _job(employer="ACME", title="dev", location="köln")
        assert dedupe([one, two]) == [one]

    def test_input_not_modified(self):
        jobs = [_job(hash_id="a"), _job(hash_id="a")]
        dedupe(jobs)
        assert len(jobs) == 2

    def test_merge_unique_counts_new_rows(self):
        existing = [_job(hash_id="a"), _job(hash_id="b")]
        merged, added = merge_unique(existing, [_job(hash_id="b"), _job(hash_id="c")])
        assert [j.hash_id for j in merged] == ["a", "b", "c"]
        assert added == 1

    def test_merge_unique_duplicate_only_page(self):
        existing = [_job(hash_id="a")]
        merged, added = merge_unique(existing, [_job(hash_id="a")])
        assert merged == existing
        assert added == 0
