"""Unit tests for modules/helpers.py"""

import json
import sys
from pathlib import Path

import pytest

# Add modules directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from modules.exceptions import DocumentLoadError
from modules.helpers import export_record, load_document, load_document_list, print_record

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


class TestLoadDocument:
    def test_yaml_document(self):
        document = load_document(str(FIXTURES_DIR / "os_profile.yaml"))
        assert document["computerNamePrefix"] == "web"
        assert document["linuxConfiguration"]["disablePasswordAuthentication"] is True

    def test_json_document(self, tmp_path):
        path = tmp_path / "boot.json"
        path.write_text(json.dumps({"enabled": True, "storageUri": "https://x"}))
        assert load_document(str(path)) == {"enabled": True, "storageUri": "https://x"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError) as exc_info:
            load_document(str(tmp_path / "nope.yaml"), "OsProfile")
        assert exc_info.value.context["parameter"] == "OsProfile"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed")
        with pytest.raises(DocumentLoadError):
            load_document(str(path))

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.yaml"
        path.write_bytes(b"name: \xff\xfe")
        with pytest.raises(DocumentLoadError) as exc_info:
            load_document(str(path), "OsProfile")
        assert exc_info.value.context["parameter"] == "OsProfile"
        assert "UTF-8" in exc_info.value.message

    def test_empty_document(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(DocumentLoadError):
            load_document(str(path))

    def test_list_wrapping(self):
        nics = load_document_list(str(FIXTURES_DIR / "nic_configs.yaml"))
        assert [n["name"] for n in nics] == ["nic1", "nic2"]

    def test_single_mapping_becomes_list(self, tmp_path):
        path = tmp_path / "ext.yaml"
        path.write_text("name: ext1\n")
        assert load_document_list(str(path)) == [{"name": "ext1"}]


class TestExportRecord:
    def test_appends_json_suffix(self, tmp_path):
        written = export_record({"b": 1, "a": 2}, str(tmp_path / "out"))
        assert written.endswith("out.json")
        assert json.loads((tmp_path / "out.json").read_text()) == {"a": 2, "b": 1}

    def test_stdout_stays_json(self, tmp_path, capsys):
        record = {"name": "rule1"}
        print_record(record, "Application rule")
        export_record(record, str(tmp_path / "rule"))
        captured = capsys.readouterr()
        assert json.loads(captured.out) == record
        assert "rule.json" in captured.err
