import pytest

from ga_io import CSV_HEADER, DataFileError, append_records, percent_to_rate, prompt_number, read_data_file
from ga_solver import GenerationRecord


def _records(n, pop=10):
    return [
        GenerationRecord(
            generation=g,
            best_fitness=0.5 / g,
            average_fitness=1.0 / g,
            crossover_rate=0.9,
            mutation_rate=0.1,
            population_size=pop,
        )
        for g in range(1, n + 1)
    ]


def test_read_data_file_concatenates_trimmed_lines(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("3\n  abc def \nghi\n\n  jkl\n")
    key_length, ciphertext = read_data_file(path)
    assert key_length == 3
    assert ciphertext == "abc defghijkl"


@pytest.mark.parametrize("content", ["", "x\nabc\n", "0\nabc\n", "-2\nabc\n", "4\n", "4\n   \n\n"])
def test_read_data_file_rejects_bad_input(tmp_path, content):
    path = tmp_path / "data.txt"
    path.write_text(content)
    with pytest.raises(DataFileError):
        read_data_file(path)


def test_read_data_file_missing(tmp_path):
    with pytest.raises(DataFileError):
        read_data_file(tmp_path / "nope.txt")


def test_append_writes_header_once(tmp_path):
    path = tmp_path / "out.csv"
    append_records(_records(2), path)
    append_records(_records(3), path)
    lines = path.read_text().splitlines()
    assert lines[0] == ",".join(CSV_HEADER)
    assert lines.count(lines[0]) == 1
    assert len(lines) == 1 + 2 + 3
    assert lines[1] == "1,0.5,1.0,0.9,0.1,10"
    assert lines[2] == "2,0.25,0.5,0.9,0.1,10"


def test_append_to_empty_file_writes_header(tmp_path):
    path = tmp_path / "out.csv"
    path.write_text("")
    append_records(_records(1), path)
    assert path.read_text().splitlines()[0] == ",".join(CSV_HEADER)


def test_append_reraises_io_errors(tmp_path, capsys):
    target = tmp_path / "dir.csv"
    target.mkdir()
    with pytest.raises(OSError):
        append_records(_records(1), target)
    assert "Error writing data to CSV" in capsys.readouterr().err


def test_percent_to_rate():
    assert percent_to_rate(0) == 0.0
    assert percent_to_rate(100) == 1.0
    assert percent_to_rate(25) == 0.25
    with pytest.raises(ValueError):
        percent_to_rate(101)


def test_prompt_number_retries_until_valid():
    answers = iter(["lots", " 12 "])
    assert prompt_number("pop: ", int, input_fn=lambda _: next(answers)) == 12


def test_prompt_number_exits_on_closed_stdin():
    def closed(_):
        raise EOFError

    with pytest.raises(SystemExit):
        prompt_number("pop: ", int, input_fn=closed)
