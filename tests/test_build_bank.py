"""
Tests for the bank build tool.
"""

import importlib.util
import json
import pytest
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from codeexam.bank import LocalBank

# tools/ holds scripts, not a package
_spec = importlib.util.spec_from_file_location(
    "build_bank", Path(__file__).parent.parent / "tools" / "build_bank.py"
)
_build_bank_module = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(_build_bank_module)
build_bank = _build_bank_module.build_bank


BANK = {
    "version": "2024.1",
    "questions": [{
        "id": "q1",
        "title": "Echo",
        "description": "Echo the input.",
        "difficulty": "Easy",
        "marks": 10,
        "sampleInput": "1",
        "sampleOutput": "1",
        "testCases": [{"input": "1", "expectedOutput": "1", "hidden": True}],
        "starterCode": {"python": ""},
    }],
}


@pytest.fixture
def bank_json(tmp_path):
    path = tmp_path / "problems.json"
    path.write_text(json.dumps(BANK), encoding='utf-8')
    return path


class TestBuildBank:
    """Test encrypting banks from the command line tool."""

    def test_new_key(self, tmp_path, bank_json, capsys):
        """Test a generated key is saved and opens the encrypted bank."""
        key_path = tmp_path / "keys" / "EXAM1.key"
        out_path = tmp_path / "banks" / "exam1.enc"

        build_bank(str(bank_json), str(out_path), new_key_file=str(key_path))

        key = key_path.read_text(encoding='utf-8').strip()
        bank = LocalBank.load(out_path, key)
        assert bank.get_problem("q1").marks == 10
        assert "SHA256" in capsys.readouterr().out

    def test_existing_key_file_reused(self, tmp_path, bank_json, capsys):
        key_path = tmp_path / "EXAM1.key"
        build_bank(str(bank_json), str(tmp_path / "a.enc"), new_key_file=str(key_path))

        build_bank(str(bank_json), str(tmp_path / "b.enc"), key_file=str(key_path))

        key = key_path.read_text(encoding='utf-8').strip()
        assert LocalBank.load(tmp_path / "b.enc", key).version == "2024.1"

    def test_new_key_never_overwrites(self, tmp_path, bank_json, capsys):
        key_path = tmp_path / "EXAM1.key"
        key_path.write_text("keep me", encoding='utf-8')

        with pytest.raises(SystemExit):
            build_bank(str(bank_json), str(tmp_path / "out.enc"), new_key_file=str(key_path))

        assert key_path.read_text(encoding='utf-8') == "keep me"
        assert not (tmp_path / "out.enc").exists()

    def test_invalid_bank_rejected_before_key_is_made(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"questions": [{"id": "q1"}]}), encoding='utf-8')
        key_path = tmp_path / "EXAM1.key"

        with pytest.raises(SystemExit):
            build_bank(str(bad), str(tmp_path / "out.enc"), new_key_file=str(key_path))

        assert not key_path.exists()
