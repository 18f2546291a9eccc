"""Command-line tools and logging setup."""
import json
import logging

import pytest

from tracklayout.logging_config import setup_logging
from tracklayout.main import main
from tracklayout.model.io import ProjectIO, project_to_dict


@pytest.fixture
def project_file(tmp_path, project):
    path = tmp_path / "track.json"
    ProjectIO.save_project(project, str(path))
    return str(path)


@pytest.fixture(autouse=True)
def _restore_logger():
    yield
    logger = logging.getLogger("tracklayout")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_bom_table(project_file, capsys):
    assert main(["bom", project_file]) == 0
    out = capsys.readouterr().out
    assert "BOM - Test Track" in out
    assert "L100" in out
    assert "Total pieces: 3" in out
    assert "2.79 m" in out


def test_bom_json(project_file, capsys):
    assert main(["bom", project_file, "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == {"totalPieces": 3, "totalLength": "2.79", "bom": {"L100": 2, "R50-90": 1}}


def test_import_legacy_export(tmp_path, project, capsys):
    legacy = tmp_path / "export.json"
    legacy.write_text(json.dumps({
        "totalPieces": 3,
        "totalLength": "2.79",
        "bom": {"L100": 2, "R50-90": 1},
        "details": project_to_dict(project)["pieces"],
    }), encoding="utf-8")
    out = tmp_path / "converted.json"

    assert main(["import", str(legacy), str(out)]) == 0
    assert "Imported 3 pieces" in capsys.readouterr().out
    assert ProjectIO.load_project(str(out)).pieces == project.pieces


def test_missing_file_fails(tmp_path, capsys):
    assert main(["bom", str(tmp_path / "nope.json")]) == 1
    assert "error:" in capsys.readouterr().err


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    log_file = tmp_path / "debug.log"
    setup_logging(level=logging.DEBUG)
    setup_logging(level=logging.DEBUG, log_file=str(log_file))
    logger = logging.getLogger("tracklayout")
    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG

    logging.getLogger("tracklayout.engine.editor").info("hello from the editor")
    for handler in logger.handlers:
        handler.flush()
    assert "hello from the editor" in log_file.read_text(encoding="utf-8")
