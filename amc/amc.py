# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
Adaptive modulation and coding (AMC): CQI and MCS selection from the SINR
measured on the allocated resource blocks
"""

import logging
import numpy as np

from phy import ErrorModel, TransportBlockSize
from amc.lookup import cqi_from_spectral_efficiency, \
    mcs_from_spectral_efficiency, mcs_from_cqi
from amc.template import check_sinr
from amc.policies import FixedLegacyPolicy, FixedTargetPolicy, \
    ExponentialTargetPolicy, HybridTargetPolicy, check_bler_target
from amc.probing import ProbingPolicy, check_cqi_gain, check_step_time

logger = logging.getLogger(__name__)

AMC_MODELS = ('error_model', 'shannon')
POLICIES = ('legacy', 'fixed', 'exponential', 'hybrid', 'probing')

# Reference bit error rate of the Shannon model
SHANNON_BER_LEGACY = 5e-5
SHANNON_BER = 1e-5


class AMC:
    """
    Adaptive modulation and coding. Selects the CQI to report and the MCS to
    use for the next transmission, either from the Shannon capacity of the
    allocated resource blocks or from the BLER predicted by an error model
    under a BLER target policy.

    Parameters
    ----------

        error_model : `ErrorModel`
            Error model predicting the BLER and providing the MCS/CQI tables

        amc_model : 'error_model' | 'shannon' (default: 'error_model')
            AMC model

        policy : 'legacy' | 'fixed' | 'exponential' | 'hybrid' | 'probing' (default: 'legacy')
            BLER target policy of the 'error_model' AMC model:

            - 'legacy': fixed BLER target of 0.1
            - 'fixed': fixed BLER target `bler_target`
            - 'exponential': BLER target decaying exponentially with the effective SINR [dB]
            - 'hybrid': 'exponential' up to 10 dB of effective SINR, 'fixed' above
            - 'probing': 'legacy', with periodic CQI probing steps

        bler_target : `float` (default: 0.1)
            BLER target of the 'fixed' and 'hybrid' policies

        crc_len : `int` (default: 24)
            CRC length [bits]

        num_ref_sc_per_rb : `int` (default: 1)
            Number of reference subcarriers per resource block

        direction : 'dl' | 'ul' (default: 'dl')
            Link direction

        clock : `callable` | `None` (default)
            Returns the current simulated time [s]. Required by the 'probing'
            policy

        cqi_gain : `int` (default: 1)
            CQI increase during a probing step

        step_duration : `float` (default: 0.1)
            Duration of a probing step [s]

        step_frequency : `float` (default: 1.)
            Time between probing steps [s]

    Input
    -----

        sinr : `list` of `float`
            SINR per resource block, linear scale. Zero denotes a resource
            block that is not allocated

    Output
    ------

        cqi : `int`
            CQI index to report

        mcs : `int`
            MCS index for the next transmission
    """

    def __init__(self,
                 error_model: ErrorModel,
                 amc_model: str = 'error_model',
                 policy: str = 'legacy',
                 bler_target: float = .1,
                 crc_len: int = 24,
                 num_ref_sc_per_rb: int = 1,
                 direction: str = 'dl',
                 clock=None,
                 cqi_gain: int = 1,
                 step_duration: float = .1,
                 step_frequency: float = 1.):
        if not isinstance(error_model, ErrorModel):
            raise ValueError('error_model must be an instance of ErrorModel')
        if clock is not None and not callable(clock):
            raise ValueError('clock must be callable')
        self.error_model = error_model
        self.tb_size = TransportBlockSize(error_model,
                                          crc_len=crc_len,
                                          num_ref_sc_per_rb=num_ref_sc_per_rb,
                                          direction=direction)
        self.clock = clock
        self._bler_target = check_bler_target(bler_target)
        self._cqi_gain = check_cqi_gain(cqi_gain)
        self._step_duration = check_step_time('step_duration', step_duration)
        self._step_frequency = check_step_time('step_frequency', step_frequency)
        self._policy = None
        self._amc_model = None
        self.policy = policy
        self.amc_model = amc_model

    @property
    def amc_model(self):
        """ Get/set the AMC model """
        return self._amc_model

    @amc_model.setter
    def amc_model(self, value):
        if value not in AMC_MODELS:
            raise ValueError(f'Invalid AMC model: {value}. Must be one of {AMC_MODELS}')
        self._amc_model = value
        if value == 'shannon':
            self._select = self._shannon
        else:
            self._select = self._policy

    @property
    def policy(self):
        """ Get/set the BLER target policy """
        return self._policy_name

    @policy.setter
    def policy(self, value):
        if value not in POLICIES:
            raise ValueError(f'Invalid policy: {value}. Must be one of {POLICIES}')
        policy = self._build_policy(value)
        self._policy_name = value
        self._policy = policy
        if self._amc_model == 'error_model':
            self._select = self._policy

    def _build_policy(self, name):
        """
        Resolve a policy name into a policy instance
        """
        if name == 'legacy':
            return FixedLegacyPolicy(self.error_model, self.tb_size)
        if name == 'fixed':
            return FixedTargetPolicy(self.error_model, self.tb_size,
                                     self.bler_target)
        if name == 'exponential':
            return ExponentialTargetPolicy(self.error_model, self.tb_size)
        if name == 'hybrid':
            return HybridTargetPolicy(self.error_model, self.tb_size,
                                      self.bler_target)
        if self.clock is None:
            raise ValueError('A clock is required by the probing policy')
        return ProbingPolicy(self.error_model, self.tb_size, self.clock,
                             cqi_gain=self.cqi_gain,
                             step_duration=self.step_duration,
                             step_frequency=self.step_frequency)

    @property
    def bler_target(self):
        """ Get/set the BLER target of the 'fixed' and 'hybrid' policies """
        return self._bler_target

    @bler_target.setter
    def bler_target(self, value):
        self._bler_target = check_bler_target(value)
        if isinstance(self._policy, (FixedTargetPolicy, HybridTargetPolicy)):
            self._policy.bler_target = self._bler_target

    @property
    def cqi_gain(self):
        """ Get/set the CQI increase during a probing step """
        return self._cqi_gain

    @cqi_gain.setter
    def cqi_gain(self, value):
        self._cqi_gain = check_cqi_gain(value)
        if isinstance(self._policy, ProbingPolicy):
            self._policy.cqi_gain = self._cqi_gain

    @property
    def step_duration(self):
        """ Get/set the duration of a probing step [s] """
        return self._step_duration

    @step_duration.setter
    def step_duration(self, value):
        self._step_duration = check_step_time('step_duration', value)
        if isinstance(self._policy, ProbingPolicy):
            self._policy.step_duration = self._step_duration

    @property
    def step_frequency(self):
        """ Get/set the time between probing steps [s] """
        return self._step_frequency

    @step_frequency.setter
    def step_frequency(self, value):
        self._step_frequency = check_step_time('step_frequency', value)
        if isinstance(self._policy, ProbingPolicy):
            self._policy.step_frequency = self._step_frequency

    @property
    def probe_state(self):
        """ Probing state, `None` if probing is not active """
        return getattr(self._policy, 'probe_state', None)

    def activate_probing(self):
        """
        Activate CQI probing. Requires the 'probing' policy
        """
        if not isinstance(self._policy, ProbingPolicy):
            raise RuntimeError(f'CQI probing requires the "probing" policy, '
                               f'current policy is "{self.policy}"')
        self._policy.activate()

    @property
    def crc_len(self):
        """ Get/set the CRC length [bits] """
        return self.tb_size.crc_len

    @crc_len.setter
    def crc_len(self, value):
        self.tb_size.crc_len = value

    @property
    def num_ref_sc_per_rb(self):
        """ Get/set the number of reference subcarriers per resource block """
        return self.tb_size.num_ref_sc_per_rb

    @num_ref_sc_per_rb.setter
    def num_ref_sc_per_rb(self, value):
        self.tb_size.num_ref_sc_per_rb = value

    @property
    def direction(self):
        """ Get/set the link direction """
        return self.tb_size.direction

    @direction.setter
    def direction(self, value):
        self.tb_size.direction = value

    @property
    def max_mcs(self):
        """ Highest MCS index """
        return self.error_model.max_mcs

    def calculate_tb_size(self, mcs, num_rb):
        """ Transport block size [bits] for MCS `mcs` over `num_rb` resource blocks """
        return self.tb_size(mcs, num_rb)

    def mcs_from_cqi(self, cqi):
        """ MCS index matching the spectral efficiency of CQI `cqi` """
        return mcs_from_cqi(self.error_model, cqi)

    def _shannon(self, sinr):
        """
        CQI and MCS from the average Shannon spectral efficiency, with a SNR
        gap set by the reference bit error rate
        """
        ber = SHANNON_BER_LEGACY if self.error_model.is_legacy else SHANNON_BER
        snr_gap = -np.log(5 * ber) / 1.5
        sinr_alloc = sinr[sinr > 0]
        if len(sinr_alloc) == 0:
            return 0, 0
        se = float(np.mean(np.log2(1 + sinr_alloc / snr_gap)))
        cqi = cqi_from_spectral_efficiency(self.error_model, se)
        mcs = mcs_from_spectral_efficiency(self.error_model, se)
        logger.debug('Shannon spectral efficiency %.3f: CQI %d, MCS %d', se, cqi, mcs)
        return cqi, mcs

    def select_cqi_and_mcs(self, sinr):
        """
        Select the CQI to report and the MCS to use given the SINR per
        resource block
        """
        sinr = check_sinr(sinr)
        return self._select(sinr)

    def __call__(self, sinr):
        return self.select_cqi_and_mcs(sinr)
