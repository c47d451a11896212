"""
Tests for the command line entry point.
"""

from run import main


def test_missing_directory_is_fatal(tmp_path, capsys):
    assert main(["--directory", str(tmp_path / "missing")]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_bad_config_file_is_fatal(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text('{"no_such_key": 1}')

    assert main(["--config", str(path)]) == 1
    assert "Unknown configuration keys" in capsys.readouterr().err
