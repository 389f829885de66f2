"""
Unit tests for the exponential effective SINR mapping.
"""

import numpy as np
import pytest

from phy import EESM
from phy.tables import EESM_BETA_TABLE1


class TestEESM:

    def test_single_resource_block_identity(self):
        eesm = EESM()
        for mcs in [0, 10, 28]:
            assert eesm([3.7], [0], mcs, a=0., b=1) == pytest.approx(3.7)

    def test_flat_sinr(self):
        """Equal SINR values map onto the same effective SINR."""
        eesm = EESM()
        assert eesm([5., 5., 5.], [0, 1, 2], 12) == pytest.approx(5.)

    def test_between_min_and_mean(self):
        sinr = np.array([1., 4., 20., 0.5])
        rb_map = [0, 1, 2, 3]
        for mcs in range(len(EESM_BETA_TABLE1)):
            sinr_eff = EESM()(sinr, rb_map, mcs)
            assert sinr.min() <= sinr_eff <= sinr.mean()

    def test_larger_beta_closer_to_mean(self):
        sinr = [1., 10.]
        eesm = EESM()
        assert eesm(sinr, [0, 1], 28) > eesm(sinr, [0, 1], 0)

    def test_only_allocated_blocks(self):
        eesm = EESM()
        assert eesm([0., 4., 0., 4.], [1, 3], 3) == pytest.approx(4.)

    def test_high_sinr_does_not_underflow(self):
        sinr_eff = EESM()([1e4, 1e4], [0, 1], 0)
        assert np.isfinite(sinr_eff)
        assert sinr_eff == pytest.approx(1e4)

    def test_offset_and_normalization(self):
        eesm = EESM(beta_table=[2.])
        sinr_eff = eesm([2.], [0], 0, a=1., b=2.)
        expected = -2. * np.log((1. + np.exp(-1.)) / 2.)
        assert sinr_eff == pytest.approx(expected)

    def test_empty_allocation(self):
        with pytest.raises(ValueError):
            EESM()([0., 0.], [], 0)

    def test_invalid_mcs(self):
        with pytest.raises(ValueError):
            EESM()([1.], [0], len(EESM_BETA_TABLE1))

    def test_invalid_beta(self):
        with pytest.raises(ValueError):
            EESM(beta_table=[1., 0.])
