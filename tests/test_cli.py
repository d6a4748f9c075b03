import pytest

import ga_solver
from ga_io import CSV_HEADER
from vigenere_cipher import encrypt

PLAIN = "the quick brown fox jumps over the lazy dog and keeps running far away"


def _data_file(tmp_path, key="fox"):
    path = tmp_path / "data.txt"
    cipher = encrypt(PLAIN, key)
    path.write_text(f"{len(key)}\n{cipher[:30]}\n{cipher[30:]}\n")
    return path


def test_main_appends_all_runs(tmp_path, capsys):
    data = _data_file(tmp_path)
    log = tmp_path / "output.csv"
    argv = ["--data", str(data), "--log", str(log), "--crossover", "90", "--mutation", "10",
            "--pop", "8", "--gens", "4", "--runs", "3", "--seed", "1", "--quiet"]
    ga_solver.main(argv)
    lines = log.read_text().splitlines()
    assert lines[0] == ",".join(CSV_HEADER)
    assert len(lines) == 1 + 3 * 4
    assert "All runs completed" in capsys.readouterr().out

    ga_solver.main(argv)
    lines = log.read_text().splitlines()
    assert len(lines) == 1 + 6 * 4
    assert lines.count(",".join(CSV_HEADER)) == 1


def test_main_prompts_for_missing_parameters(tmp_path, monkeypatch):
    data = _data_file(tmp_path)
    log = tmp_path / "output.csv"
    answers = iter(["50", "5", "6", "2"])
    monkeypatch.setattr("builtins.input", lambda _: next(answers))
    ga_solver.main(["--data", str(data), "--log", str(log), "--runs", "1", "--seed", "3", "--quiet"])
    rows = log.read_text().splitlines()[1:]
    assert len(rows) == 2
    assert rows[0].split(",")[3:] == ["0.5", "0.05", "6"]


def test_main_exits_on_bad_data_file(tmp_path):
    data = tmp_path / "data.txt"
    data.write_text("three\nabc\n")
    with pytest.raises(SystemExit):
        ga_solver.main(["--data", str(data), "--crossover", "1", "--mutation", "1",
                        "--pop", "4", "--gens", "1", "--quiet"])


def test_main_exits_on_odd_population(tmp_path):
    data = _data_file(tmp_path)
    with pytest.raises(SystemExit):
        ga_solver.main(["--data", str(data), "--log", str(tmp_path / "o.csv"), "--crossover", "1",
                        "--mutation", "1", "--pop", "5", "--gens", "1", "--quiet"])


def test_main_with_polish_and_quadgrams(tmp_path, capsys):
    data = _data_file(tmp_path)
    ga_solver.main(["--data", str(data), "--log", str(tmp_path / "o.csv"), "--crossover", "80",
                    "--mutation", "20", "--pop", "6", "--gens", "2", "--runs", "1", "--seed", "2",
                    "--fitness", "quadgram", "--polish", "50", "--crossover-mode", "one_point", "--quiet"])
    assert "polished key" in capsys.readouterr().out


def test_main_exits_before_running_on_non_ascii_ciphertext(tmp_path, capsys):
    data = tmp_path / "data.txt"
    data.write_text("2\nééé ñ\n", encoding="utf8")
    log = tmp_path / "o.csv"
    with pytest.raises(SystemExit) as exc:
        ga_solver.main(["--data", str(data), "--log", str(log), "--crossover", "50",
                        "--mutation", "10", "--pop", "4", "--gens", "1", "--quiet"])
    assert "Invalid configuration" in str(exc.value)
    assert "Datafile:" not in capsys.readouterr().out
    assert not log.exists()
