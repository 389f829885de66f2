"""
Shared fixtures: deterministic error models and simulated clocks.
"""

import numpy as np
import pytest

from phy import NrErrorModel, LteErrorModel, ErrorModelOutput, SimulationClock


class FixedBlerErrorModel(NrErrorModel):
    """NR tables, with a predicted BLER that only depends on the MCS."""

    def __init__(self, bler_by_mcs):
        super().__init__()
        assert len(bler_by_mcs) == self.max_mcs + 1
        self.bler_by_mcs = list(bler_by_mcs)
        self.calls = []

    def predict_bler(self, sinr, rb_map, tb_size, mcs, history=None):
        self.calls.append((mcs, tb_size))
        if len(rb_map) == 0:
            return ErrorModelOutput(bler=1.)
        return ErrorModelOutput(bler=self.bler_by_mcs[mcs])


def _bler_profile(first_violation, n_mcs=29, low=.01, high=.5):
    return [low] * first_violation + [high] * (n_mcs - first_violation)


@pytest.fixture
def bler_profile():
    """BLER below 0.1 up to `first_violation` (excluded), above from there on."""
    return _bler_profile


@pytest.fixture
def nr_model() -> NrErrorModel:
    return NrErrorModel()


@pytest.fixture
def lte_model() -> LteErrorModel:
    return LteErrorModel()


@pytest.fixture
def fixed_bler_model():
    """Factory of `FixedBlerErrorModel` instances."""
    return FixedBlerErrorModel


@pytest.fixture
def clock() -> SimulationClock:
    return SimulationClock()


@pytest.fixture
def flat_sinr():
    """Flat SINR sample over `num_rb` resource blocks, from a dB value."""
    def _make(sinr_db, num_rb=10):
        return np.full(num_rb, 10 ** (sinr_db / 10))
    return _make
