# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
Exponential Effective SINR Mapping (EESM)
"""

import numpy as np
from phy.tables import EESM_BETA_TABLE1


class EESM:
    r"""
    Exponential Effective SINR Mapping. Compresses the SINR values of the
    allocated resource blocks into a single effective SINR, calibrated per MCS
    index:

    .. math::

        \text{SINR}_{\text{eff}} = -\beta_{\text{mcs}} \ln \left( \frac{a + \sum_{i \in \text{map}} e^{-\text{SINR}_i / \beta_{\text{mcs}}}}{b} \right)

    Parameters
    ----------
        beta_table: `list` of `float` (default: `EESM_BETA_TABLE1`)
            Calibration factor beta, one per MCS index

    Input
    -----
        sinr: `list` of `float`
            SINR per resource block, linear scale

        rb_map: `list` of `int`
            Indices of the allocated resource blocks

        mcs: `int`
            MCS index selecting beta

        a: `float` (default: 0.)
            Offset added to the exponential sum

        b: `float` | `None` (default)
            Normalization of the exponential sum. If `None`, it is set to
            ``len(rb_map)``, yielding the EESM average

    Output
    ------
        sinr_eff: `float`
            Effective SINR, linear scale
    """

    def __init__(self, beta_table=None):
        if beta_table is None:
            beta_table = EESM_BETA_TABLE1
        beta_table = np.asarray(beta_table, dtype=float)
        if np.any(beta_table <= 0):
            raise ValueError('EESM beta values must be positive')
        self.beta_table = beta_table

    def __call__(self,
                 sinr,
                 rb_map,
                 mcs,
                 a=0.,
                 b=None):
        if len(rb_map) == 0:
            raise ValueError('Cannot compute the effective SINR of an empty allocation')
        if not 0 <= mcs < len(self.beta_table):
            raise ValueError(f'MCS index {mcs} has no EESM beta value. '
                             f'Valid range: [0, {len(self.beta_table) - 1}]')
        if b is None:
            b = len(rb_map)
        if a < 0 or b <= 0:
            raise ValueError(f'EESM requires a >= 0 and b > 0, got a={a}, b={b}')
        beta = self.beta_table[mcs]
        sinr_alloc = np.asarray(sinr, dtype=float)[np.asarray(rb_map, dtype=int)]

        # log(a + sum(exp(-sinr / beta))), computed in the log domain so that
        # high SINR values do not underflow
        log_sum = np.logaddexp.reduce(-sinr_alloc / beta)
        if a > 0:
            log_sum = np.logaddexp(np.log(a), log_sum)
        return float(-beta * (log_sum - np.log(b)))
