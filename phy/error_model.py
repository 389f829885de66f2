# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
Error models predicting the transport block error rate (BLER) of a
transmission, together with the MCS/CQI tables they are calibrated on
"""

from abc import abstractmethod
from dataclasses import dataclass
import math
import numpy as np

from phy import BlerCurves, EESM, lin_to_db, get_bler_sigmoid_params
from phy.tables import NR_MCS_SPECTRAL_EFFICIENCY, NR_MCS_CODE_RATE, \
    NR_CQI_SPECTRAL_EFFICIENCY, NR_BLER_SIGMOID_PARAMS, \
    LTE_MCS_SPECTRAL_EFFICIENCY, LTE_CQI_SPECTRAL_EFFICIENCY, \
    LTE_BLER_SIGMOID_PARAMS, EESM_BETA_TABLE1

# Link directions and number of OFDM symbols carrying data in a slot
DIRECTIONS = ('dl', 'ul')
NUM_DATA_SYMBOLS = {'dl': 12, 'ul': 13}


@dataclass(frozen=True)
class ErrorModelOutput:
    """ Outcome of a BLER prediction """
    bler: float
    sinr_eff: float = 0.
    num_cb: int = 0
    cb_size: int = 0


class ErrorModel:
    """
    Interface of an error model, as consumed by adaptive modulation and
    coding. An error model predicts the transport BLER of a transmission and
    exposes the MCS and CQI spectral efficiency tables it is calibrated on.
    """

    #: Whether the model is the legacy one, whose payload size already
    #: accounts for the parity bits
    is_legacy = False

    @property
    @abstractmethod
    def max_mcs(self):
        """ Highest MCS index """

    @property
    @abstractmethod
    def eesm_beta(self):
        """ EESM calibration factor, one per MCS index """

    @abstractmethod
    def spectral_efficiency_for_mcs(self, mcs):
        """ Nominal spectral efficiency [bit/s/Hz] of MCS `mcs` """

    @abstractmethod
    def spectral_efficiency_for_cqi(self, cqi):
        """ Spectral efficiency [bit/s/Hz] required by CQI `cqi` """

    @abstractmethod
    def max_code_block_size(self, payload_size, mcs):
        """ Maximum code block size [bits] for the given payload and MCS """

    @abstractmethod
    def payload_size(self, usable_sc, mcs, num_rb, direction):
        """ Number of bits carried by `num_rb` resource blocks at MCS `mcs` """

    @abstractmethod
    def predict_bler(self, sinr, rb_map, tb_size, mcs, history=None):
        """ Predict the transport BLER, returns an `ErrorModelOutput` """


class TableErrorModel(ErrorModel):
    """
    Table-driven error model. The effective SINR of the allocation is
    computed via EESM, the code block BLER via a sigmoid approximation of the
    BLER curve of the selected MCS, and the transport BLER accounts for the
    code block segmentation of the transport block:
    ``TBLER = 1 - (1 - CBLER) ** num_cb``

    Parameters
    ----------
        mcs_spectral_efficiency : `list` of `float`
            Spectral efficiency of each MCS index

        cqi_spectral_efficiency : `list` of `float`
            Spectral efficiency required by each CQI index

        bler_sigmoid_params : `dict`
            Sigmoid parameters approximating the BLER function of each MCS

        eesm_beta : `list` of `float`
            EESM calibration factor of each MCS

        max_cb_size : `int` (default: 8448)
            Maximum code block size [bits]

    Input (`predict_bler`)
    ----------------------
        sinr : `list` of `float`
            SINR per resource block, linear scale

        rb_map : `list` of `int`
            Indices of the allocated resource blocks

        tb_size : `int`
            Transport block size [bits]

        mcs : `int`
            MCS index

        history : `list` | `None` (default)
            HARQ history of previous transmissions of the same block. Not
            used: no soft combining is modeled

    Output (`predict_bler`)
    -----------------------
        output : `ErrorModelOutput`
            Predicted transport BLER, effective SINR and code block
            segmentation
    """

    def __init__(self,
                 mcs_spectral_efficiency,
                 cqi_spectral_efficiency,
                 bler_sigmoid_params: dict,
                 eesm_beta,
                 max_cb_size: int = 8448):
        self.mcs_spectral_efficiency = np.asarray(mcs_spectral_efficiency, dtype=float)
        self.cqi_spectral_efficiency = np.asarray(cqi_spectral_efficiency, dtype=float)
        if len(self.cqi_spectral_efficiency) != 16:
            raise ValueError('The CQI table must contain 16 entries')
        self.bler_curves = BlerCurves(bler_sigmoid_params)
        if len(self.bler_curves) != len(self.mcs_spectral_efficiency):
            raise ValueError('bler_sigmoid_params must contain one value per MCS index')
        if len(eesm_beta) < len(self.mcs_spectral_efficiency):
            raise ValueError('eesm_beta must contain one value per MCS index')
        self.eesm = EESM(eesm_beta)
        self.max_cb_size = int(max_cb_size)

    @classmethod
    def from_bler_table(cls, bler_table_df, table_index=1, cbs=None, **kwargs):
        """
        Instantiate the model from a BLER sigmoid table stored in a
        `pandas.DataFrame`. See `get_bler_sigmoid_params`
        """
        bler_sigmoid_params = get_bler_sigmoid_params(bler_table_df,
                                                      table_index,
                                                      cbs=cbs)
        return cls(bler_sigmoid_params=bler_sigmoid_params, **kwargs)

    @property
    def max_mcs(self):
        return len(self.mcs_spectral_efficiency) - 1

    @property
    def eesm_beta(self):
        return self.eesm.beta_table

    def _check_mcs(self, mcs):
        if not 0 <= mcs <= self.max_mcs:
            raise ValueError(f'MCS index must be in [0, {self.max_mcs}], got {mcs}')

    def spectral_efficiency_for_mcs(self, mcs):
        self._check_mcs(mcs)
        return float(self.mcs_spectral_efficiency[mcs])

    def spectral_efficiency_for_cqi(self, cqi):
        if not 0 <= cqi <= 15:
            raise ValueError(f'CQI index must be in [0, 15], got {cqi}')
        return float(self.cqi_spectral_efficiency[cqi])

    def max_code_block_size(self, payload_size, mcs):
        self._check_mcs(mcs)
        return self.max_cb_size

    def payload_size(self, usable_sc, mcs, num_rb, direction):
        if direction not in DIRECTIONS:
            raise ValueError(f'Invalid direction: {direction}. '
                             f'Must be one of {DIRECTIONS}')
        re_per_rb = usable_sc * NUM_DATA_SYMBOLS[direction]
        return int(math.floor(re_per_rb * num_rb *
                              self.spectral_efficiency_for_mcs(mcs)))

    def predict_bler(self, sinr, rb_map, tb_size, mcs, history=None):
        self._check_mcs(mcs)
        if len(rb_map) == 0 or tb_size <= 0:
            # Nothing can be delivered
            return ErrorModelOutput(bler=1.)

        sinr_eff = self.eesm(sinr, rb_map, mcs)
        sinr_eff_db = lin_to_db(max(sinr_eff, np.finfo(float).tiny))

        # Code block segmentation
        cb_size = self.max_code_block_size(tb_size, mcs)
        num_cb = max(1, math.ceil(tb_size / cb_size))

        cbler = float(self.bler_curves.bler(mcs, sinr_eff_db))
        tbler = 1 - (1 - cbler) ** num_cb
        return ErrorModelOutput(bler=tbler,
                                sinr_eff=sinr_eff,
                                num_cb=num_cb,
                                cb_size=cb_size)


class NrErrorModel(TableErrorModel):
    """
    NR error model for MCS table 1 and CQI table 1 of 3GPP TS 38.214, with
    LDPC code block sizes. The maximum code block size depends on the LDPC
    base graph (BG) selected for the transport block: 8448 bits for BG1,
    3840 bits for BG2.

    Parameters
    ----------
        bler_sigmoid_params : `dict` | `None` (default)
            Sigmoid parameters approximating the BLER function. If `None`,
            built-in parameters are used

        eesm_beta : `list` of `float` | `None` (default)
            EESM calibration factor. If `None`, the MCS table 1 values are used
    """

    def __init__(self,
                 bler_sigmoid_params: dict | None = None,
                 eesm_beta=None):
        if bler_sigmoid_params is None:
            bler_sigmoid_params = NR_BLER_SIGMOID_PARAMS
        if eesm_beta is None:
            eesm_beta = EESM_BETA_TABLE1
        super().__init__(NR_MCS_SPECTRAL_EFFICIENCY,
                         NR_CQI_SPECTRAL_EFFICIENCY,
                         bler_sigmoid_params,
                         eesm_beta,
                         max_cb_size=8448)

    def max_code_block_size(self, payload_size, mcs):
        self._check_mcs(mcs)
        code_rate = NR_MCS_CODE_RATE[mcs]
        # Base graph selection, TS 38.212 Section 7.2.2
        if payload_size <= 292 or code_rate <= .25 or \
                (payload_size <= 3824 and code_rate <= .67):
            return 3840
        return 8448


class LteErrorModel(TableErrorModel):
    """
    Legacy LTE error model (TS 36.213 tables, turbo code with 6144-bit code
    blocks). Its payload size is already the transport block size, hence
    `is_legacy` is `True`

    Parameters
    ----------
        bler_sigmoid_params : `dict` | `None` (default)
            Sigmoid parameters approximating the BLER function. If `None`,
            built-in parameters are used
    """

    is_legacy = True

    def __init__(self,
                 bler_sigmoid_params: dict | None = None,
                 eesm_beta=None):
        if bler_sigmoid_params is None:
            bler_sigmoid_params = LTE_BLER_SIGMOID_PARAMS
        if eesm_beta is None:
            eesm_beta = EESM_BETA_TABLE1
        super().__init__(LTE_MCS_SPECTRAL_EFFICIENCY,
                         LTE_CQI_SPECTRAL_EFFICIENCY,
                         bler_sigmoid_params,
                         eesm_beta,
                         max_cb_size=6144)
