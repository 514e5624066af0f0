"""Tests for the Terraform prefix variables document."""

import json
from pathlib import Path

import pytest

from nbprefix import DocumentError, PrefixRecord, generate_sequence, parse_network_address
from nbprefix.config.tfvars import PrefixDocument, validate_prefix_name


def _write(path, data) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


class TestLoad:
    """Tests for PrefixDocument.load."""

    def test_load_existing(self, tmp_path) -> None:
        """Existing prefixes are read in file order."""
        path = tmp_path / "terraform.tfvars.json"
        _write(path, {
            "netbox_url": "https://netbox.example.com",
            "prefixes": {
                "mgmt": {"prefix": "10.0.0.0/24", "description": "Management", "status": "active", "is_pool": False},
                "pool": {"prefix": "10.1.0.0/16", "description": "Pool", "status": "container", "is_pool": True},
            },
        })
        doc = PrefixDocument.load(path)
        assert doc.names() == ["mgmt", "pool"]
        assert doc.get("pool") == PrefixRecord("10.1.0.0/16", "Pool", "container", True)
        assert "mgmt" in doc
        assert len(doc) == 2

    def test_missing_prefixes_key(self, tmp_path) -> None:
        """A file without a prefixes map is an empty document."""
        path = tmp_path / "terraform.tfvars.json"
        _write(path, {"netbox_url": "https://netbox.example.com"})
        assert len(PrefixDocument.load(path)) == 0

    def test_seed_from_example(self, tmp_path) -> None:
        """A missing file starts from the example template."""
        example = tmp_path / "terraform.tfvars.json.example"
        _write(example, {"netbox_url": "https://netbox.example.com", "prefixes": {}})
        path = tmp_path / "terraform.tfvars.json"

        doc = PrefixDocument.load(path, example=example)
        assert doc.path == path
        assert doc.to_dict()["netbox_url"] == "https://netbox.example.com"

    def test_neither_exists(self, tmp_path) -> None:
        """No file and no example is a DocumentError."""
        with pytest.raises(DocumentError, match="Neither"):
            PrefixDocument.load(tmp_path / "a.json", example=tmp_path / "b.json")

    def test_invalid_json(self, tmp_path) -> None:
        """Malformed JSON is reported as a DocumentError."""
        path = tmp_path / "terraform.tfvars.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DocumentError, match="not valid JSON"):
            PrefixDocument.load(path)

    def test_entry_without_prefix(self, tmp_path) -> None:
        """Every entry needs a prefix field."""
        path = tmp_path / "terraform.tfvars.json"
        _write(path, {"prefixes": {"broken": {"description": "x"}}})
        with pytest.raises(DocumentError, match="broken"):
            PrefixDocument.load(path)


class TestAdd:
    """Tests for adding prefixes."""

    def test_add_and_duplicate(self, tmp_path) -> None:
        """A name can only be added once."""
        doc = PrefixDocument(tmp_path / "t.json")
        record = PrefixRecord("10.0.0.0/24", "Subnet 10.0.0.0/24")
        assert doc.add("net_01", record) is True
        assert doc.add("net_01", PrefixRecord("10.0.1.0/24", "other")) is False
        assert doc.get("net_01") == record

    def test_invalid_status(self, tmp_path) -> None:
        """Only NetBox prefix statuses are accepted."""
        doc = PrefixDocument(tmp_path / "t.json")
        with pytest.raises(DocumentError, match="Invalid status"):
            doc.add("x", PrefixRecord("10.0.0.0/24", "x", status="enabled"))

    def test_add_sequence(self, tmp_path) -> None:
        """Generated subnets are added in order with derived descriptions."""
        doc = PrefixDocument(tmp_path / "t.json")
        doc.add("net_02", PrefixRecord("10.9.9.0/24", "already here"))

        named = generate_sequence(parse_network_address("10.0.0.0"), 24, 3, "net")
        result = doc.add_sequence(named, description_prefix="Office", status="reserved", is_pool=True)

        assert result.added == ["net_01", "net_03"]
        assert result.skipped == ["net_02"]
        assert doc.get("net_03") == PrefixRecord("10.0.2.0/24", "Office 10.0.2.0/24", "reserved", True)
        assert doc.get("net_02").prefix == "10.9.9.0/24"


class TestSave:
    """Tests for writing the document back."""

    def test_save_round_trip_and_backup(self, tmp_path) -> None:
        """Saving keeps other variables and copies the old file aside."""
        path = tmp_path / "terraform.tfvars.json"
        _write(path, {"netbox_url": "https://netbox.example.com", "prefixes": {}})

        doc = PrefixDocument.load(path)
        doc.add("mgmt", PrefixRecord("10.0.0.0/24", "Management"))
        backup = doc.save()

        assert backup == tmp_path / "terraform.tfvars.json.backup"
        assert json.loads(backup.read_text())["prefixes"] == {}

        saved = json.loads(path.read_text())
        assert saved["netbox_url"] == "https://netbox.example.com"
        assert saved["prefixes"]["mgmt"] == {
            "prefix": "10.0.0.0/24",
            "description": "Management",
            "status": "active",
            "is_pool": False,
        }

    def test_save_new_file(self, tmp_path) -> None:
        """No backup is made when the file did not exist."""
        doc = PrefixDocument(tmp_path / "sub" / "t.json")
        doc.add("a", PrefixRecord("10.0.0.0/24", "a"))
        assert doc.save() is None
        assert (tmp_path / "sub" / "t.json").exists()

    def test_save_without_backup(self, tmp_path) -> None:
        """backup=False skips the copy."""
        path = tmp_path / "t.json"
        _write(path, {"prefixes": {}})
        doc = PrefixDocument.load(path)
        assert doc.save(backup=False) is None
        assert not (tmp_path / "t.json.backup").exists()


class TestTenantAndNames:
    """Tests for tenant IDs and the prefix name rule."""

    def test_tenant_round_trip(self, tmp_path) -> None:
        """tenant_id is written only when set and read back as an int."""
        path = tmp_path / "t.json"
        doc = PrefixDocument(path)
        doc.add("lan", PrefixRecord("192.168.1.0/24", "LAN", tenant_id=3))
        doc.add("wan", PrefixRecord("203.0.113.0/24", "WAN"))
        doc.save()

        saved = json.loads(path.read_text())["prefixes"]
        assert saved["lan"]["tenant_id"] == 3
        assert "tenant_id" not in saved["wan"]

        reloaded = PrefixDocument.load(path)
        assert reloaded.get("lan").tenant_id == 3
        assert reloaded.get("wan").tenant_id is None

    def test_tenant_must_be_integer(self, tmp_path) -> None:
        path = tmp_path / "t.json"
        _write(path, {"prefixes": {"lan": {"prefix": "10.0.0.0/24", "tenant_id": "three"}}})
        with pytest.raises(DocumentError, match="tenant_id"):
            PrefixDocument.load(path)

    @pytest.mark.parametrize("name", ["my net", "1net", "_net", "net-01", ""])
    def test_invalid_name(self, tmp_path, name: str) -> None:
        """Names start with a letter and use only letters, digits and underscores."""
        doc = PrefixDocument(tmp_path / "t.json")
        with pytest.raises(DocumentError, match="Invalid prefix name"):
            doc.add(name, PrefixRecord("10.0.0.0/24", "x"))
        assert len(doc) == 0

    @pytest.mark.parametrize("name", ["a", "net_01", "Office2", "subnet_10_0_0_0"])
    def test_valid_name(self, name: str) -> None:
        assert validate_prefix_name(name) == name


class TestSaveFailure:
    """Tests for save() when the write fails."""

    def test_tmp_file_removed(self, tmp_path, monkeypatch) -> None:
        """A failed rename leaves neither a temp file nor a changed target."""
        path = tmp_path / "t.json"
        _write(path, {"prefixes": {}})
        doc = PrefixDocument.load(path)
        doc.add("a", PrefixRecord("10.0.0.0/24", "a"))

        def fail_replace(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", fail_replace)
        with pytest.raises(OSError, match="disk full"):
            doc.save(backup=False)

        assert not (tmp_path / "t.json.tmp").exists()
        assert json.loads(path.read_text()) == {"prefixes": {}}
