import json

from consultant_scraper.core import storage
from consultant_scraper.models import Location, ProfileRecord


def test_safe_filename():
    assert storage.safe_filename("abc-123_x.y") == "abc-123_x.y"
    assert storage.safe_filename("") == "_empty"

    cleaned = storage.safe_filename("../etc/passwd")
    prefix, digest = cleaned.rsplit("_", 1)
    assert prefix == ".._etc_passwd"
    assert len(digest) == 8
    assert "/" not in cleaned


def test_safe_filename_keeps_distinct_identities_apart():
    stems = {storage.safe_filename(identity) for identity in ("a/b", "a b", "a_b")}

    assert len(stems) == 3
    assert "a_b" in stems
    assert storage.safe_filename("a/b") == storage.safe_filename("a/b")


def test_write_csv_always_writes_header(tmp_path):
    path = storage.write_csv(tmp_path / "nested" / "empty.csv", [], ["ID", "Name"])

    assert path.read_text(encoding="utf-8").strip() == "ID,Name"


def test_save_writes_json_and_csv(store):
    record = ProfileRecord(id="abc", name="Jane, Doe", locations=[Location(branch="Main", zip=None)])

    store.save(store.list_dir, "sample", [record.to_dict()], [{"ID": "abc", "Name": "Jane, Doe"}], ["ID", "Name"])

    saved = json.loads((store.list_dir / "sample.json").read_text(encoding="utf-8"))
    assert saved[0]["locations"] == [{"branch": "Main"}]
    rows = storage.read_csv(store.list_dir / "sample.csv")
    assert rows == [{"ID": "abc", "Name": "Jane, Doe"}]


def test_load_profiles_reads_persisted_list(store, tmp_path):
    path = tmp_path / "list.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "abc",
                    "name": "Jane",
                    "title": "FC",
                    "designation": "",
                    "locations": [{"branch": "Main", "city": "Springfield"}],
                    "phoneNumbers": ["555"],
                }
            ]
        ),
        encoding="utf-8",
    )

    profiles = store.load_profiles(path)

    assert profiles == [
        ProfileRecord(
            id="abc",
            name="Jane",
            title="FC",
            locations=[Location(branch="Main", city="Springfield")],
            phone_numbers=["555"],
        )
    ]
