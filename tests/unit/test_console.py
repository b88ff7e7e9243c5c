import io

from nanonet.core.network import NeuralNet
from nanonet.data.truth_tables import decode_bool, parity_table
from nanonet.reporting.console import ResultsTable


def _net():
    return NeuralNet(4, 3, 2, lambda _: False, seed=0)


def test_results_table_prints_every_row():
    stream = io.StringIO()
    table = ResultsTable(_net(), parity_table(), stream=stream)
    table.on_epoch(0, {"correct": 8, "total": 16})
    lines = stream.getvalue().splitlines()
    assert lines[0] == "Epoch 0\tCorrect: 8/16"
    rows = [line for line in lines if line.startswith("Expected: ")]
    assert len(rows) == 16
    assert rows[0] == "Expected: False\tActual: False"
    assert rows[2] == "Expected: True\tActual: False\t<- wrong"
    assert sum(line.endswith("<- wrong") for line in rows) == 8


def test_results_table_appends_network_parameters():
    net = _net()
    stream = io.StringIO()
    table = ResultsTable(net, parity_table(), show_rows=False, show_network=True, stream=stream)
    table(3, {"correct": 8, "total": 16})
    out = stream.getvalue()
    assert "Expected: " not in out
    assert out.startswith("Epoch 3\tCorrect: 8/16\n\n")
    assert net.format_parameters() in out


def test_results_table_defaults_to_stdout(capsys):
    table = ResultsTable(NeuralNet(4, 3, 2, decode_bool, seed=7), parity_table()[:2])
    table.on_epoch(1, {"correct": 1, "total": 2})
    out = capsys.readouterr().out
    assert out.count("Expected: ") == 2
