import json

from consultant_scraper.core import storage
from consultant_scraper.jobs import dedupe_list, fix_csv


def test_dedupe_list_file(store, tmp_path, caplog):
    source = tmp_path / "all.json"
    source.write_text(
        json.dumps(
            [
                {"id": "a", "name": "First"},
                {"id": "b", "name": "B"},
                {"id": "a", "name": "Second"},
            ]
        ),
        encoding="utf-8",
    )
    target = tmp_path / "out" / "unique.json"

    with caplog.at_level("INFO"):
        count = dedupe_list.dedupe_list_file(store, source, target)

    assert count == 2
    saved = json.loads(target.read_text(encoding="utf-8"))
    assert [item["name"] for item in saved] == ["First", "B"]
    assert "before removing duplicates: 3" in " ".join(caplog.messages)


def test_fix_csv_file(tmp_path):
    source = tmp_path / "details.csv"
    storage.write_csv(
        source,
        [
            {"ID": "abc", "Name": "Jane", "BranchInformation": "Branch details:1 Elm RdSpringfield(555) 555-1234"},
            {"ID": "xyz", "Name": "John", "BranchInformation": ""},
        ],
        ["ID", "Name", "BranchInformation"],
    )
    target = tmp_path / "details_new.csv"

    count = fix_csv.fix_csv_file(source, target, "https://example.com/consultant")

    assert count == 2
    rows = storage.read_csv(target)
    assert list(rows[0]) == ["details_url", "ID", "Name", "BranchInformation"]
    assert rows[0]["details_url"] == "https://example.com/consultant/abc"
    assert rows[0]["BranchInformation"] == "1 Elm Rd Springfield (555) 555-1234"
    assert rows[1]["BranchInformation"] == ""


def test_fix_csv_file_with_no_rows(tmp_path):
    source = tmp_path / "details.csv"
    storage.write_csv(source, [], ["ID"])

    assert fix_csv.fix_csv_file(source, tmp_path / "out.csv", "https://example.com") == 0
    assert not (tmp_path / "out.csv").exists()
