import pytest

from nanonet.core.network import NeuralNet
from nanonet.data.truth_tables import decode_bool, encode_bool, parity_table
from nanonet.training.trainer import DEFAULT_MAX_EPOCHS, Trainer

# Seed 7 converges in about 6,000 epochs and seed 8 in about 10,000.
CONVERGING_SEEDS = (7, 8)


@pytest.mark.slow
@pytest.mark.parametrize("seed", CONVERGING_SEEDS)
def test_three_input_parity_is_learned_within_budget(seed):
    rows = parity_table()
    net = NeuralNet(4, 3, 2, decode_bool, seed=seed)
    result = Trainer(network=net, encode=encode_bool).run(rows, max_epochs=DEFAULT_MAX_EPOCHS)
    assert result.converged, f"seed {seed} stopped at {result.correct}/16 after {result.epochs} epochs"
    assert result.epochs < DEFAULT_MAX_EPOCHS
    assert all(net.infer(x) == label for x, label in rows)
