# tests/test_app.py
import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from heroprint import app
from heroprint.controllers import extract_controller

PAGE_HTML = """
<html><head><title>Acme</title></head>
<body>
  <section style="top:0;left:0;width:1440px;height:700px">
    <h1 style="top:200px;left:200px;width:800px;height:80px;font-size:48px">Deploy on every push</h1>
    <a href="/signup" style="top:320px;left:200px;width:180px;height:48px">Get started</a>
  </section>
</body></html>
"""


@pytest.fixture(autouse=True)
def restore_logging():
    """main() herconfigureert de root logger; zet die na elke test terug."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(PAGE_HTML, encoding="utf-8")
    return path


def test_extract_prints_fingerprint_json(page_file, capsys):
    """Test of 'extract' het fingerprint als JSON naar stdout schrijft."""
    assert app.main(["extract", str(page_file), "--viewport", "1440x900"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["headline"] == "Deploy on every push"
    assert data["primary_cta_text"] == "Get started"


def test_extract_compact_output(page_file, capsys):
    assert app.main(["extract", str(page_file), "--indent", "0"]) == 0
    out = capsys.readouterr().out.strip()
    assert "\n" not in out
    assert json.loads(out)["headline"] == "Deploy on every push"


def test_extract_missing_file(tmp_path, capsys):
    assert app.main(["extract", str(tmp_path / "nope.html")]) == 1
    assert "❌" in capsys.readouterr().err


def test_invalid_viewport_is_rejected(page_file):
    with pytest.raises(SystemExit):
        app.main(["extract", str(page_file), "--viewport", "wide"])


def test_batch_on_empty_directory(tmp_path, capsys):
    assert app.main(["batch", str(tmp_path)]) == 0
    assert "No snapshots found." in capsys.readouterr().out


def test_batch_on_missing_directory(tmp_path, capsys):
    assert app.main(["batch", str(tmp_path / "missing")]) == 1
    assert "❌" in capsys.readouterr().err


def test_batch_exports_and_reports_failures(tmp_path, page_file, monkeypatch, capsys):
    """Een kapotte snapshot levert exitcode 2 op, de rest wordt toch geëxporteerd."""
    monkeypatch.setattr(extract_controller, "ProcessPoolExecutor", ThreadPoolExecutor)
    (tmp_path / "broken.json").write_text("[]", encoding="utf-8")
    output = tmp_path / "results" / "fingerprints.json"

    code = app.main(["batch", str(tmp_path), "-o", str(output), "--workers", "1"])

    assert code == 2
    out = capsys.readouterr().out
    assert "1 fingerprinted, 1 failed" in out
    assert "broken.json" in out
    rows = json.loads(output.read_text(encoding="utf-8"))
    assert [r["headline"] for r in rows] == ["Deploy on every push"]


def test_batch_rejects_unknown_export_format(tmp_path, page_file, monkeypatch, capsys):
    monkeypatch.setattr(extract_controller, "ProcessPoolExecutor", ThreadPoolExecutor)
    code = app.main(["batch", str(tmp_path), "-o", str(tmp_path / "out.txt"), "--workers", "1"])

    assert code == 1
    assert "Export failed" in capsys.readouterr().err
