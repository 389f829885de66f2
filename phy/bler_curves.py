# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
Sigmoid approximation of per-MCS BLER curves
"""

import numpy as np


class Sigmoid:
    """
    Sigmoid function with configurable center and scale, used as the
    probability of successful decoding as a function of SINR [dB]

    Parameters
    ----------
        center: `float` | `np.ndarray` (default: 0.)
            Center of the sigmoid function

        scale: `float` | `np.ndarray` (default: 1.)
            Scale of the sigmoid function, determining its steepness

        clip_val: `float` (default: 1e-16)
            Clip value for the sigmoid function. Useful to avoid numerical
            errors

    Output
    ------
        val: `float`
            Sigmoid function value
    """

    def __init__(self, center=0., scale=1., clip_val=1e-16):
        self.center = center
        self.scale = scale
        self.clip_val = clip_val

    def __call__(self, x):
        val = 1 / (1 + np.exp(-(x - self.center) / self.scale))
        return np.clip(val, self.clip_val, 1 - self.clip_val)

    def inverse(self, y):
        """ Point at which the sigmoid equals `y` """
        y = np.clip(y, self.clip_val, 1 - self.clip_val)
        return self.center + self.scale * np.log(y / (1 - y))


class BlerCurves:
    """
    Set of code block BLER curves, one per MCS index:
    ``BLER(mcs, sinr_db) = 1 - Sigmoid(center[mcs], scale[mcs])(sinr_db)``

    Parameters
    ----------
        bler_sigmoid_params: `dict`
            Sigmoid parameters approximating the BLER function. Must contain
            the keys "center" and "scale", with one value per MCS index

    """

    def __init__(self,
                 bler_sigmoid_params: dict):
        if 'center' not in bler_sigmoid_params:
            raise ValueError('bler_sigmoid_params must contain a "center" key')
        if 'scale' not in bler_sigmoid_params:
            raise ValueError('bler_sigmoid_params must contain a "scale" key')
        if len(bler_sigmoid_params['center']) != len(bler_sigmoid_params['scale']):
            raise ValueError(
                'bler_sigmoid_params must contain the same number of "center" and "scale" values')
        self.center = np.asarray(bler_sigmoid_params['center'], dtype=float)
        self.scale = np.asarray(bler_sigmoid_params['scale'], dtype=float)
        if np.any(self.scale <= 0):
            raise ValueError('Sigmoid scale values must be positive')

    def __len__(self):
        return len(self.center)

    def _sigmoid(self, mcs):
        return Sigmoid(center=self.center[mcs], scale=self.scale[mcs])

    def bler(self, mcs, sinr_db):
        """ Code block BLER at MCS `mcs` for effective SINR `sinr_db` """
        return 1 - self._sigmoid(mcs)(sinr_db)

    def sinr_db_for_bler(self, mcs, bler):
        """ Effective SINR [dB] at which MCS `mcs` reaches `bler` """
        return self._sigmoid(mcs).inverse(1 - bler)
