"""
Unit tests for the error models, BLER curves and BLER table loading.
"""

import numpy as np
import pandas as pd
import pytest

from phy import NrErrorModel, LteErrorModel, BlerCurves, Sigmoid, \
    get_bler_sigmoid_params, db_to_lin
from phy.tables import NR_BLER_SIGMOID_PARAMS


def make_bler_table(table_index=1, n_mcs=29, cbs=None):
    rows = []
    for cbs_i in (cbs or [None]):
        for mcs in range(n_mcs):
            row = {'table_index': table_index,
                   'MCS': mcs,
                   'sigmoid_center_db': -5. + mcs,
                   'sigmoid_scale_db': .7}
            if cbs_i is not None:
                row['CBS_num_info_bits'] = cbs_i
                row['sigmoid_center_db'] += cbs_i / 10000
            rows.append(row)
    # Shuffled, to check sorting by MCS
    return pd.DataFrame(rows).sample(frac=1, random_state=3)


class TestTables:

    def test_nr_tables(self, nr_model):
        assert nr_model.max_mcs == 28
        assert nr_model.spectral_efficiency_for_mcs(28) == pytest.approx(5.5547, abs=1e-4)
        assert nr_model.spectral_efficiency_for_cqi(0) == 0.
        assert nr_model.spectral_efficiency_for_cqi(15) == pytest.approx(6 * 948 / 1024)
        assert not nr_model.is_legacy

    def test_lte_tables(self, lte_model):
        assert lte_model.max_mcs == 28
        assert lte_model.is_legacy
        assert lte_model.max_code_block_size(100000, 28) == 6144

    def test_cqi_table_non_decreasing(self, nr_model, lte_model):
        for model in [nr_model, lte_model]:
            se = [model.spectral_efficiency_for_cqi(cqi) for cqi in range(16)]
            assert np.all(np.diff(se) >= 0)

    def test_out_of_range(self, nr_model):
        with pytest.raises(ValueError):
            nr_model.spectral_efficiency_for_mcs(29)
        with pytest.raises(ValueError):
            nr_model.spectral_efficiency_for_cqi(16)
        with pytest.raises(ValueError):
            nr_model.spectral_efficiency_for_cqi(-1)
        with pytest.raises(ValueError):
            nr_model.payload_size(11, 0, 1, 'sidelink')


class TestLdpcCodeBlockSize:

    @pytest.mark.parametrize("payload, mcs, cb_size", [
        (200, 28, 3840),     # small payload
        (10000, 0, 3840),    # code rate <= 1/4
        (3000, 10, 3840),    # payload <= 3824, code rate <= 0.67
        (3000, 28, 8448),
        (10000, 28, 8448),
    ])
    def test_base_graph_selection(self, nr_model, payload, mcs, cb_size):
        assert nr_model.max_code_block_size(payload, mcs) == cb_size


class TestPredictBler:

    def test_nothing_allocated(self, nr_model):
        assert nr_model.predict_bler([0., 0.], [], 100, 5).bler == 1.
        assert nr_model.predict_bler([1., 1.], [0, 1], 0, 5).bler == 1.

    def test_sinr_dependence(self, nr_model, flat_sinr):
        sinr = flat_sinr(25.)
        rb_map = list(range(len(sinr)))
        assert nr_model.predict_bler(sinr, rb_map, 1000, 0).bler < 1e-6
        sinr = flat_sinr(-5.)
        assert nr_model.predict_bler(sinr, rb_map, 1000, 28).bler > 1 - 1e-6

    def test_code_block_segmentation(self, nr_model):
        """At the sigmoid center, each code block fails with probability 1/2."""
        mcs = 20
        sinr = [db_to_lin(NR_BLER_SIGMOID_PARAMS['center'][mcs])]
        one_cb = nr_model.predict_bler(sinr, [0], 1000, mcs)
        three_cb = nr_model.predict_bler(sinr, [0], 20000, mcs)
        assert one_cb.num_cb == 1
        assert one_cb.bler == pytest.approx(.5)
        assert three_cb.num_cb == 3
        assert three_cb.bler == pytest.approx(1 - .5 ** 3)

    def test_effective_sinr_reported(self, nr_model, flat_sinr):
        sinr = flat_sinr(10., num_rb=4)
        output = nr_model.predict_bler(sinr, [0, 1, 2, 3], 500, 4)
        assert output.sinr_eff == pytest.approx(10.)


class TestBlerCurves:

    def test_inverse(self):
        curves = BlerCurves(NR_BLER_SIGMOID_PARAMS)
        sinr_db = curves.sinr_db_for_bler(10, .1)
        assert curves.bler(10, sinr_db) == pytest.approx(.1)

    def test_sigmoid_clipping(self):
        sigmoid = Sigmoid(center=0., scale=1.)
        assert sigmoid(100.) < 1.
        assert sigmoid(-100.) > 0.

    def test_invalid_params(self):
        with pytest.raises(ValueError):
            BlerCurves({'center': [1., 2.]})
        with pytest.raises(ValueError):
            BlerCurves({'center': [1., 2.], 'scale': [1.]})
        with pytest.raises(ValueError):
            BlerCurves({'center': [1.], 'scale': [0.]})


class TestBlerTableLoading:

    def test_get_bler_sigmoid_params(self):
        params, mcs_min = get_bler_sigmoid_params(make_bler_table(), 1,
                                                  return_mcs_min_available=True)
        assert mcs_min == 0
        np.testing.assert_allclose(params['center'], -5. + np.arange(29))
        np.testing.assert_allclose(params['scale'], .7)

    def test_code_block_size_selection(self):
        df = make_bler_table(cbs=[1000, 5000])
        params = get_bler_sigmoid_params(df, 1, cbs=5000)
        np.testing.assert_allclose(params['center'], -4.5 + np.arange(29))
        with pytest.raises(ValueError):
            get_bler_sigmoid_params(df, 1)
        with pytest.raises(ValueError):
            get_bler_sigmoid_params(df, 1, cbs=2000)

    def test_unknown_table_index(self):
        with pytest.raises(ValueError):
            get_bler_sigmoid_params(make_bler_table(), 2)

    def test_model_from_bler_table(self):
        model = NrErrorModel.from_bler_table(make_bler_table())
        np.testing.assert_allclose(model.bler_curves.center, -5. + np.arange(29))
        assert LteErrorModel.from_bler_table(make_bler_table()).is_legacy

    def test_wrong_number_of_mcs(self):
        with pytest.raises(ValueError):
            NrErrorModel.from_bler_table(make_bler_table(n_mcs=20))
