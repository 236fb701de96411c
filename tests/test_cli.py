import io
import json
import sys
import unittest.mock as mock

import pytest

from json_hash.cli import _cli_error, _fail_with_error, main
from json_hash.errors import HashWrongError, JsonHashError


def test_fail_with_error(capsys):
    err = JsonHashError(code="TEST_ERR", message="Test message.", context="test context")
    with pytest.raises(SystemExit) as e:
        _fail_with_error(err)
    assert e.value.code == 1
    captured = capsys.readouterr()
    assert "ERROR: TEST_ERR. Test message. Context: test context." in captured.out


def test_cli_error(capsys):
    with pytest.raises(SystemExit) as e:
        _cli_error("What", "Why", "Fix")
    assert e.value.code == 1
    captured = capsys.readouterr()
    assert "ERROR: What. Why. Fix: Fix." in captured.out


def test_cli_main_help(capsys):
    with pytest.raises(SystemExit) as e:
        main(["--help"])
    assert e.value.code == 0
    assert "JSON content hashing CLI" in capsys.readouterr().out


def test_digest(capsys):
    main(["digest", '{"key":"value"}'])
    assert capsys.readouterr().out.strip() == "5Dq88zdSRIOcAS-WM_lYYt"


def test_digest_hash_length(capsys):
    main(["--hash-length", "8", "digest", '{"key":"value"}'])
    assert capsys.readouterr().out.strip() == "5Dq88zdS"


def test_invalid_hash_length(capsys):
    with pytest.raises(SystemExit) as e:
        main(["--hash-length", "0", "digest", "x"])
    assert e.value.code == 1
    assert "ERROR: Invalid hash configuration" in capsys.readouterr().out


def test_apply_file(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text('{"key": "value", "child": {"key": "value"}}', encoding="utf-8")

    main(["apply", str(doc)])
    hashed = json.loads(capsys.readouterr().out)
    assert hashed["child"]["_hash"] == "5Dq88zdSRIOcAS-WM_lYYt"
    assert hashed["_hash"]


def test_apply_stdin(capsys):
    with mock.patch.object(sys, "stdin", io.StringIO('{"key": "value"}')):
        main(["apply"])
    assert capsys.readouterr().out.strip() == '{"key": "value", "_hash": "5Dq88zdSRIOcAS-WM_lYYt"}'


def test_apply_rejects_wrong_hash(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text('{"key": "value", "_hash": "wrongHash"}', encoding="utf-8")

    with pytest.raises(SystemExit) as e:
        main(["apply", str(doc)])
    assert e.value.code == 1
    assert "ERROR: JSONHASH_E300." in capsys.readouterr().out


def test_apply_no_throw_overwrites(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text('{"key": "value", "_hash": "wrongHash"}', encoding="utf-8")

    main(["apply", str(doc), "--no-throw"])
    assert json.loads(capsys.readouterr().out)["_hash"] == "5Dq88zdSRIOcAS-WM_lYYt"


def test_apply_invalid_json(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text("{not json", encoding="utf-8")

    with pytest.raises(SystemExit) as e:
        main(["apply", str(doc)])
    assert e.value.code == 1
    assert "ERROR: Input is not valid JSON" in capsys.readouterr().out


def test_apply_requires_object(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(SystemExit):
        main(["apply", str(doc)])
    assert "ERROR: Input is not a JSON object" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main(["validate", str(tmp_path / "nope.json")])
    assert "ERROR: Cannot read" in capsys.readouterr().out


def test_validate_pass(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text('{"key": "value", "_hash": "5Dq88zdSRIOcAS-WM_lYYt"}', encoding="utf-8")

    main(["validate", str(doc)])
    assert "PASS" in capsys.readouterr().out


def test_validate_fail(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text('{"key": "value", "child": {"key": "value"}}', encoding="utf-8")

    with pytest.raises(SystemExit) as e:
        main(["validate", str(doc)])
    assert e.value.code == 1
    assert "ERROR: JSONHASH_E301. Hash is missing." in capsys.readouterr().out


def test_validate_ignore_missing(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text('{"key": "value", "child": {"key": "value"}}', encoding="utf-8")

    main(["validate", str(doc), "--ignore-missing"])
    assert "PASS" in capsys.readouterr().out


def test_validate_routes_errors(tmp_path):
    doc = tmp_path / "doc.json"
    doc.write_text('{"_hash": "x"}', encoding="utf-8")

    with mock.patch("json_hash.cli._fail_with_error", side_effect=SystemExit(1)) as fail:
        with pytest.raises(SystemExit):
            main(["validate", str(doc)])
    assert isinstance(fail.call_args[0][0], HashWrongError)
