# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
BLER target policies: fixed, SINR-dependent exponential and hybrid
"""

import numpy as np

from phy import EESM, lin_to_db
from amc.template import CqiPolicy

# BLER target of the legacy policy
LEGACY_BLER_TARGET = .1

# Exponential BLER target: EXP_TARGET_SCALE * exp(-EXP_TARGET_DECAY * SINR_eff_dB)
EXP_TARGET_SCALE = .3
EXP_TARGET_DECAY = .08

# Upper bound of the exponential BLER target, reached below about -15 dB
EXP_TARGET_MAX = 1 - 1e-6

# Effective SINR [dB] above which the hybrid policy switches to its fixed target
HYBRID_CROSSOVER_DB = 10.


def check_bler_target(value):
    """ Validate a BLER target """
    if not 0 < value < 1:
        raise ValueError(f'bler_target must be in (0, 1), got {value}')
    return float(value)


def exponential_bler_target(sinr_eff_db):
    """
    SINR-dependent BLER target, decaying exponentially with the SINR in dB
    and bounded by `EXP_TARGET_MAX`
    """
    return float(np.minimum(EXP_TARGET_SCALE * np.exp(-EXP_TARGET_DECAY * sinr_eff_db),
                            EXP_TARGET_MAX))


class FixedLegacyPolicy(CqiPolicy):
    """
    Legacy policy: every MCS must meet a BLER target of 0.1
    """

    def _target(self, sinr, rb_map, mcs):
        return LEGACY_BLER_TARGET


class FixedTargetPolicy(CqiPolicy):
    """
    Fixed, configurable BLER target

    Parameters
    ----------

        bler_target: `float`
            BLER target, in (0, 1)
    """

    def __init__(self,
                 error_model,
                 tb_size_fun,
                 bler_target: float):
        super().__init__(error_model, tb_size_fun)
        self.bler_target = bler_target

    @property
    def bler_target(self):
        """ BLER target """
        return self._bler_target

    @bler_target.setter
    def bler_target(self, value):
        self._bler_target = check_bler_target(value)

    def _target(self, sinr, rb_map, mcs):
        return self.bler_target


class ExponentialTargetPolicy(CqiPolicy):
    """
    SINR-dependent BLER target, ``0.3 * exp(-0.08 * SINR_eff_dB)``. The
    effective SINR depends on the candidate MCS via its EESM calibration,
    hence it is recomputed for every candidate.

    Parameters
    ----------

        eesm: `EESM` | `None` (default)
            Effective SINR mapping. If `None`, it is built from the error
            model's calibration table
    """

    def __init__(self,
                 error_model,
                 tb_size_fun,
                 eesm: EESM | None = None):
        super().__init__(error_model, tb_size_fun)
        if eesm is None:
            eesm = EESM(error_model.eesm_beta)
        self.eesm = eesm

    def sinr_eff_db(self, sinr, rb_map, mcs):
        """ EESM average of the allocated SINR values for MCS `mcs`, in dB """
        sinr_eff = self.eesm(sinr, rb_map, mcs, a=0., b=len(rb_map))
        return lin_to_db(sinr_eff)

    def _target(self, sinr, rb_map, mcs):
        return exponential_bler_target(self.sinr_eff_db(sinr, rb_map, mcs))


class HybridTargetPolicy(ExponentialTargetPolicy):
    """
    Exponential BLER target up to an effective SINR of 10 dB, fixed BLER
    target above

    Parameters
    ----------

        bler_target: `float`
            BLER target above the crossover SINR, in (0, 1)

        eesm: `EESM` | `None` (default)
            Effective SINR mapping
    """

    def __init__(self,
                 error_model,
                 tb_size_fun,
                 bler_target: float,
                 eesm: EESM | None = None):
        super().__init__(error_model, tb_size_fun, eesm=eesm)
        self.bler_target = bler_target

    @property
    def bler_target(self):
        """ BLER target above the crossover SINR """
        return self._bler_target

    @bler_target.setter
    def bler_target(self, value):
        self._bler_target = check_bler_target(value)

    def _target(self, sinr, rb_map, mcs):
        sinr_eff_db = self.sinr_eff_db(sinr, rb_map, mcs)
        if sinr_eff_db <= HYBRID_CROSSOVER_DB:
            return exponential_bler_target(sinr_eff_db)
        return self.bler_target
