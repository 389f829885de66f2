# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
CQI selection policy template and the BLER target search shared by policies
"""

from abc import abstractmethod
from functools import cached_property
import logging
import numpy as np

from phy import ErrorModel
from amc.lookup import cqi_from_mcs, MAX_CQI

logger = logging.getLogger(__name__)


def get_rb_map(sinr):
    """ Indices of the allocated resource blocks, i.e., with non-zero SINR """
    return [ii for ii, sinr_i in enumerate(sinr) if sinr_i != 0]


def check_sinr(sinr):
    """ Validate a SINR sample and convert it to a 1-D array """
    sinr = np.asarray(sinr, dtype=float)
    if sinr.ndim != 1:
        raise ValueError(f'sinr must be a 1-D sequence, got shape {sinr.shape}')
    if np.any(sinr < 0) or np.any(np.isnan(sinr)):
        raise ValueError('sinr values must be non-negative linear power ratios')
    return sinr


class BlerTargetSearch:
    """
    Select the highest MCS index whose predicted BLER does not exceed a BLER
    target, and the CQI matching its spectral efficiency.

    MCS indices are scanned upward from 0 and the scan stops at the first MCS
    whose predicted BLER exceeds the target. If MCS 0 already exceeds it, CQI
    0 is reported. If no MCS exceeds it, the highest MCS and CQI 15 are
    selected.

    Parameters
    ----------

        error_model: `ErrorModel`
            Error model predicting the BLER

        tb_size_fun: `callable`
            Transport block size as a function of (mcs, num_rb)

    Input
    -----

        sinr: `np.ndarray`
            SINR per resource block, linear scale. Zero denotes a resource
            block that is not allocated

        target_fun: `callable`
            BLER target as a function of (sinr, rb_map, mcs), evaluated for
            every candidate MCS

    Output
    ------

        cqi: `int`
            Selected CQI index

        mcs: `int`
            Selected MCS index
    """

    def __init__(self,
                 error_model: ErrorModel,
                 tb_size_fun):
        self.error_model = error_model
        self.tb_size_fun = tb_size_fun

    def __call__(self,
                 sinr,
                 target_fun):
        rb_map = get_rb_map(sinr)
        if len(rb_map) == 0:
            logger.debug('No allocated resource block, reporting CQI 0')
            return 0, 0

        max_mcs = self.error_model.max_mcs
        mcs = 0
        while True:
            tb_size = self.tb_size_fun(mcs, len(rb_map))
            output = self.error_model.predict_bler(sinr, rb_map, tb_size, mcs)
            if output.bler > target_fun(sinr, rb_map, mcs):
                break
            if mcs == max_mcs:
                logger.debug('Highest MCS %d meets the BLER target', mcs)
                return MAX_CQI, mcs
            mcs += 1

        if mcs == 0:
            logger.debug('No MCS meets the BLER target, reporting CQI 0')
            return 0, 0

        # The last MCS exceeded the target
        mcs -= 1
        cqi = cqi_from_mcs(self.error_model, mcs)
        logger.debug('Selected MCS %d, CQI %d', mcs, cqi)
        return cqi, mcs


class CqiPolicy:
    """
    CQI selection policy template. A policy defines the BLER target that the
    selected MCS must meet

    Parameters
    ----------

        error_model: `ErrorModel`
            Error model predicting the BLER

        tb_size_fun: `callable`
            Transport block size as a function of (mcs, num_rb)

    Input
    -----

        sinr: `list` of `float`
            SINR per resource block, linear scale

    Output
    ------

        cqi: `int`
            CQI index to report

        mcs: `int`
            MCS index for the next transmission
    """

    def __init__(self,
                 error_model: ErrorModel,
                 tb_size_fun):
        if not isinstance(error_model, ErrorModel):
            raise ValueError('error_model must be an instance of ErrorModel')
        if not callable(tb_size_fun):
            raise ValueError('tb_size_fun must be callable')
        self.error_model = error_model
        self.tb_size_fun = tb_size_fun

    @cached_property
    def search(self):
        """ BLER target search over the MCS indices """
        return BlerTargetSearch(self.error_model, self.tb_size_fun)

    @abstractmethod
    def _target(self, sinr, rb_map, mcs):
        """
        BLER target that MCS `mcs` must meet
        """

    def __call__(self,
                 sinr):
        sinr = check_sinr(sinr)
        return self.search(sinr, self._target)
