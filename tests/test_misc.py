"""
Unit tests for conversions, the simulated clock, SINR traces and AMC runs.
"""

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pytest

from phy import lin_to_db, db_to_lin, SimulationClock, generate_ar, \
    rescale, run_amc, plot_results
from amc import AMC


class TestConversions:

    def test_db(self):
        assert lin_to_db(100.) == pytest.approx(20.)
        assert db_to_lin(-10.) == pytest.approx(.1)
        x = np.array([.5, 3., 42.])
        np.testing.assert_allclose(db_to_lin(lin_to_db(x)), x)


class TestSimulationClock:

    def test_advance(self):
        clock = SimulationClock(start=2.)
        assert clock() == 2.
        assert clock.advance(.5) == 2.5
        assert clock.now == 2.5

    def test_backwards(self):
        clock = SimulationClock()
        with pytest.raises(ValueError):
            clock.advance(-1.)


class TestGenerateAr:

    def test_rescale(self):
        np.testing.assert_allclose(rescale([1., 3., 2.], (0., 10.)), [0., 10., 5.])
        np.testing.assert_array_equal(rescale([4., 4.], (0., 1.)), [4., 4.])

    def test_bounds(self):
        x = generate_ar(500, .95, 1., (-5., 25.), seed=1)
        assert len(x) == 500
        assert x.min() == pytest.approx(-5.)
        assert x.max() == pytest.approx(25.)

    def test_seed(self):
        np.testing.assert_array_equal(generate_ar(50, .9, 1., (0, 1), seed=4),
                                      generate_ar(50, .9, 1., (0, 1), seed=4))


class TestRunAmc:

    def test_history(self, nr_model):
        sinr_db = generate_ar(40, .9, 1., (-10., 30.), seed=0)
        hist = run_amc(AMC(nr_model), sinr_db, num_rb=20)
        for key in ['cqi', 'mcs', 'tb_size', 'bler', 'se']:
            assert len(hist[key]) == 40
        assert np.all((hist['cqi'] >= 0) & (hist['cqi'] <= 15))
        assert np.all((hist['bler'] >= 0) & (hist['bler'] <= 1))
        assert np.all(hist['se'][hist['cqi'] == 0] == 0)

    def test_high_sinr(self, nr_model):
        hist = run_amc(AMC(nr_model), [40.] * 5, num_rb=10)
        np.testing.assert_array_equal(hist['cqi'], 15)
        np.testing.assert_array_equal(hist['mcs'], 28)

    def test_clock_advances(self, nr_model):
        clock = SimulationClock()
        amc = AMC(nr_model, policy='probing', clock=clock)
        amc.activate_probing()
        run_amc(amc, [15.] * 100, num_rb=10, clock=clock, slot_duration=1e-2)
        assert clock.now == pytest.approx(1.)


class TestPlotResults:

    def test_figure(self, nr_model):
        sinr_db = generate_ar(30, .9, 1., (0., 20.), seed=2)
        hist = {'legacy': run_amc(AMC(nr_model), sinr_db, num_rb=10),
                'fixed': run_amc(AMC(nr_model, policy='fixed', bler_target=.3),
                                 sinr_db, num_rb=10)}
        fig = plot_results(sinr_db, hist, bler_target=.1, plot_only=['fixed'])
        assert len(fig.axes) == 4
        plt.close(fig)
