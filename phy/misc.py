# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
Miscellaneous utility functions
"""

import numpy as np


def lin_to_db(x):
    """ Convert a linear power ratio to dB """
    return 10 * np.log10(x)


def db_to_lin(x):
    """ Convert a power ratio in dB to linear scale """
    return 10 ** (np.asarray(x, dtype=float) / 10)


def get_bler_sigmoid_params(bler_table_df,
                            table_index,
                            cbs=None,
                            return_mcs_min_available=False):
    """
    Get BLER sigmoid parameters from a BLER table stored in `bler_table_df`

    Input:
    ------
        bler_table_df: `pandas.DataFrame`
            BLER table. Columns: 'table_index', 'MCS', 'sigmoid_center_db',
            'sigmoid_scale_db' and, optionally, 'category' and
            'CBS_num_info_bits'

        table_index: `int`
            MCS table index

        cbs: `int` | `None` (default)
            Code block size. Required if the table contains the
            'CBS_num_info_bits' column

        return_mcs_min_available: `bool` (default: `False`)
            If `True`, also return the minimum MCS index available

    Output:
    ------
        bler_sigmoid_params: `dict`
            Sigmoid parameters approximating the BLER function

        mcs_min_available: `int`
            Minimum MCS index available
    """
    df = bler_table_df[bler_table_df['table_index'] == table_index]
    if 'category' in df.columns:
        df = df[df['category'] == 'PDSCH']
    if len(df) == 0:
        raise ValueError(f'MCS table index {table_index} not found in the data')

    if 'CBS_num_info_bits' in df.columns:
        if cbs is None:
            raise ValueError('cbs must be provided if the BLER table contains '
                             'multiple code block sizes')
        if cbs not in df['CBS_num_info_bits'].unique():
            raise ValueError(f'Code block size {cbs} not found in the data. ' +
                             f'Available CBS: {df["CBS_num_info_bits"].unique()}')
        df = df[df['CBS_num_info_bits'] == cbs]
    df = df.sort_values(by='MCS')

    bler_sigmoid_params = {
        'center': df['sigmoid_center_db'].values,
        'scale': df['sigmoid_scale_db'].values
    }

    if return_mcs_min_available:
        return bler_sigmoid_params, int(df['MCS'].min())
    else:
        return bler_sigmoid_params


class SimulationClock:
    """
    Simulated time source, in seconds. Calling the instance returns the
    current time
    """

    def __init__(self, start=0.):
        self.now = start

    def advance(self, delta):
        """ Move the clock forward by `delta` seconds """
        if delta < 0:
            raise ValueError('Simulated time cannot go backwards')
        self.now += delta
        return self.now

    def __call__(self):
        return self.now


def run_amc(amc,
            sinr_hist_db,
            num_rb,
            clock=None,
            slot_duration=1e-3):
    """
    Run adaptive modulation and coding over a SINR trace

    Input:
    ------

        amc: `amc.AMC`
            Adaptive modulation and coding instance

        sinr_hist_db: `list` of `float`
            SINR [dB] in each slot, flat over the allocated resource blocks

        num_rb: `int`
            Number of allocated resource blocks

        clock: `SimulationClock` | `None` (default)
            If provided, advanced by `slot_duration` at every slot

        slot_duration: `float` (default: 1e-3)
            Slot duration [s]

    Output:
    ------

        hist: `dict` of `np.ndarray`
            History of CQI ('cqi'), MCS ('mcs'), transport block size
            ('tb_size'), predicted BLER ('bler') and spectral efficiency
            ('se') values
    """
    n_obs = len(sinr_hist_db)
    hist = {
        'cqi': np.zeros(n_obs, dtype=int),
        'mcs': np.zeros(n_obs, dtype=int),
        'tb_size': np.zeros(n_obs, dtype=int),
        'bler': np.zeros(n_obs),
        'se': np.zeros(n_obs)
    }
    error_model = amc.error_model
    rb_map = list(range(num_rb))

    for ii in range(n_obs):
        if clock is not None:
            clock.advance(slot_duration)
        sinr = np.full(num_rb, db_to_lin(sinr_hist_db[ii]))

        cqi, mcs = amc.select_cqi_and_mcs(sinr)
        tb_size = amc.calculate_tb_size(mcs, num_rb)

        hist['cqi'][ii] = cqi
        hist['mcs'][ii] = mcs
        hist['tb_size'][ii] = tb_size
        hist['bler'][ii] = error_model.predict_bler(sinr, rb_map, tb_size, mcs).bler
        if cqi > 0:
            hist['se'][ii] = error_model.spectral_efficiency_for_mcs(mcs)

    return hist


def rescale(y, bounds):
    """
    Affinely map a SINR trace onto `bounds`. A constant trace is returned
    unchanged
    """
    y = np.asarray(y, dtype=float)
    y_min, y_max = y.min(), y.max()
    if y_max == y_min:
        return y
    return bounds[0] + (y - y_min) * (bounds[1] - bounds[0]) / (y_max - y_min)


def generate_ar(n_samples, coef, std_noise, bounds, seed=None):
    """
    Generate an AR(1) SINR trace rescaled to `bounds`
    """
    rng = np.random.default_rng(seed)
    x = np.zeros(n_samples)
    for t in range(1, n_samples):
        x[t] = coef * x[t-1] + rng.standard_normal() * std_noise
    x = rescale(x, bounds)
    return x
