"""
Tests for txgen_core.verify - DuckDB checks over generated output.
"""

import json
import os

import pytest
from conftest import StubValueProvider

from txgen_core.runner import GenerationRunner, RunConfig
from txgen_core.verify import verify_output


def generate(tmp_path, **kwargs):
    config = RunConfig(output_dir=str(tmp_path), seed=3, **kwargs)
    result = GenerationRunner(config, values=StubValueProvider()).run()
    assert result.ok
    return config


def rewrite_jsonl(path, transform):
    with open(path, encoding="utf-8") as f:
        records = [json.loads(line) for line in f]
    records = transform(records)
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record) + "\n")


class TestCleanOutput:
    @pytest.mark.parametrize("fmt", ["json", "csv"])
    def test_generated_output_verifies(self, tmp_path, fmt):
        config = generate(tmp_path, users=6, transactions=40, providers=3, format=fmt)
        report = verify_output(str(tmp_path), fmt, expected=config.targets())
        assert report.ok, report.problems
        assert report.counts == {
            "users": 6,
            "addresses": 6,
            "providers": 3,
            "transactions": 40,
        }

    def test_per_kind_output_verifies(self, tmp_path):
        generate(
            tmp_path,
            users=3,
            transactions=5,
            providers=2,
            id_mode="per-kind",
            start_ids={"transaction": 100},
        )
        # ids overlap between files, which is fine in per-kind mode
        assert verify_output(str(tmp_path), id_mode="per-kind").ok
        shared = verify_output(str(tmp_path), id_mode="shared")
        assert any("shared between entity files" in p for p in shared.problems)

    def test_without_address_ids(self, tmp_path):
        generate(tmp_path, users=4, transactions=4, providers=1, format="csv", address_ids=False)
        assert verify_output(str(tmp_path), "csv", address_ids=False).ok

    def test_empty_transactions(self, tmp_path):
        generate(tmp_path, users=2, transactions=0, providers=0, format="csv")
        report = verify_output(str(tmp_path), "csv")
        assert report.ok
        assert report.counts["transactions"] == 0


class TestDetectedProblems:
    def test_orphan_user_reference(self, tmp_path):
        generate(tmp_path, users=3, transactions=5, providers=2)

        def break_fk(records):
            records[0]["user_id"] = 999_999
            return records

        rewrite_jsonl(os.path.join(str(tmp_path), "transactions.json"), break_fk)
        report = verify_output(str(tmp_path))
        assert not report.ok
        assert any("transactions.user_id" in p for p in report.problems)

    def test_duplicate_ids(self, tmp_path):
        generate(tmp_path, users=3, transactions=2, providers=1)

        def duplicate(records):
            records[1]["id"] = records[0]["id"]
            return records

        rewrite_jsonl(os.path.join(str(tmp_path), "users.json"), duplicate)
        report = verify_output(str(tmp_path))
        assert any("users: 1 duplicate id(s)" in p for p in report.problems)

    def test_missing_address(self, tmp_path):
        generate(tmp_path, users=3, transactions=1, providers=1)
        rewrite_jsonl(os.path.join(str(tmp_path), "addresses.json"), lambda r: r[1:])
        report = verify_output(str(tmp_path))
        assert any("without exactly one address" in p for p in report.problems)

    def test_amount_above_max(self, tmp_path):
        generate(tmp_path, users=1, transactions=3, providers=1)

        def inflate(records):
            records[0]["amount"] = 5000.0
            return records

        rewrite_jsonl(os.path.join(str(tmp_path), "transactions.json"), inflate)
        assert verify_output(str(tmp_path)).ok
        report = verify_output(str(tmp_path), max_amount=1000.0)
        assert any("amount(s) out of range" in p for p in report.problems)

    def test_amount_below_min(self, tmp_path):
        generate(tmp_path, users=1, transactions=3, providers=1)

        def deflate(records):
            records[0]["amount"] = 0.01
            return records

        rewrite_jsonl(os.path.join(str(tmp_path), "transactions.json"), deflate)
        assert verify_output(str(tmp_path), max_amount=1000.0).ok
        report = verify_output(str(tmp_path), min_amount=1.0, max_amount=1000.0)
        assert report.problems == ["transactions: 1 amount(s) out of range"]

    def test_wrong_counts(self, tmp_path):
        generate(tmp_path, users=2, transactions=3, providers=1)
        report = verify_output(str(tmp_path), expected={"transactions": 4})
        assert report.problems == ["transactions: expected 4 record(s), found 3"]

    def test_unknown_expected_stem(self, tmp_path):
        generate(tmp_path, users=1, transactions=1, providers=1)
        with pytest.raises(ValueError, match="orders"):
            verify_output(str(tmp_path), expected={"orders": 1})


def test_missing_file_raises(tmp_path):
    generate(tmp_path, users=1, transactions=1, providers=1)
    os.remove(os.path.join(str(tmp_path), "providers.json"))
    with pytest.raises(FileNotFoundError, match="providers.json"):
        verify_output(str(tmp_path))


def test_unsupported_format(tmp_path):
    with pytest.raises(ValueError, match="Unsupported format"):
        verify_output(str(tmp_path), "xml")
