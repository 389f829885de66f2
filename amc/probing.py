# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
CQI probing: periodically report a CQI higher than the one supported by the
channel, to probe for headroom
"""

from enum import Enum
import logging

from amc.template import CqiPolicy, check_sinr, get_rb_map
from amc.lookup import cqi_from_mcs, mcs_from_cqi, MAX_CQI
from amc.policies import LEGACY_BLER_TARGET

logger = logging.getLogger(__name__)


def check_cqi_gain(value):
    """ Validate a probing CQI gain """
    if int(value) != value or not 0 <= value <= MAX_CQI:
        raise ValueError(f'cqi_gain must be an integer in [0, {MAX_CQI}], got {value}')
    return int(value)


def check_step_time(name, value):
    """ Validate a probing step duration or frequency """
    if value <= 0:
        raise ValueError(f'{name} must be positive, got {value}')
    return value


class ProbeStep(Enum):
    """ Probing state """
    OUT_STEP = 0
    IN_STEP = 1


class ProbeState:
    """
    Mutable probing state of a link, created upon activation
    """

    def __init__(self):
        self.step = ProbeStep.OUT_STEP
        self.last_activation_time = 0.
        self.held_cqi = 0
        # CQI increase actually applied at the last step up, after clamping
        self.applied_gain = 0
        # Predicted BLER of each MCS walked at the last step up
        self.probe_bler = []


class ProbingPolicy(CqiPolicy):
    """
    Probing CQI policy. Out of a probing step, the CQI is selected with the
    legacy BLER target of 0.1. Every `step_frequency` seconds, the reported
    CQI is raised by `cqi_gain` and held for `step_duration` seconds, after
    which it is lowered back.

    Probing must be enabled via `activate`. Until then, the policy behaves as
    the legacy one.

    Parameters
    ----------

        error_model: `ErrorModel`
            Error model predicting the BLER

        tb_size_fun: `callable`
            Transport block size as a function of (mcs, num_rb)

        clock: `callable`
            Returns the current simulated time [s]

        cqi_gain: `int` (default: 1)
            CQI increase during a probing step

        step_duration: `float` (default: 0.1)
            Duration of a probing step [s]

        step_frequency: `float` (default: 1.)
            Time between the end of a probing step and the next one [s]

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
                 error_model,
                 tb_size_fun,
                 clock,
                 cqi_gain: int = 1,
                 step_duration: float = .1,
                 step_frequency: float = 1.):
        super().__init__(error_model, tb_size_fun)
        if not callable(clock):
            raise ValueError('clock must be callable')
        self.clock = clock
        self.cqi_gain = cqi_gain
        self.step_duration = step_duration
        self.step_frequency = step_frequency
        self.probe_state = None

    @property
    def cqi_gain(self):
        """ CQI increase during a probing step """
        return self._cqi_gain

    @cqi_gain.setter
    def cqi_gain(self, value):
        self._cqi_gain = check_cqi_gain(value)

    @property
    def step_duration(self):
        """ Duration of a probing step [s] """
        return self._step_duration

    @step_duration.setter
    def step_duration(self, value):
        self._step_duration = check_step_time('step_duration', value)

    @property
    def step_frequency(self):
        """ Time between probing steps [s] """
        return self._step_frequency

    @step_frequency.setter
    def step_frequency(self, value):
        self._step_frequency = check_step_time('step_frequency', value)

    @property
    def is_active(self):
        """ Whether probing was activated """
        return self.probe_state is not None

    def activate(self):
        """
        Enable probing. Can be called only once per link
        """
        if self.probe_state is not None:
            raise RuntimeError('CQI probing is already active on this link')
        self.probe_state = ProbeState()
        logger.info('CQI probing activated: gain %d, step duration %s s, '
                    'step frequency %s s', self.cqi_gain, self.step_duration,
                    self.step_frequency)

    def _target(self, sinr, rb_map, mcs):
        return LEGACY_BLER_TARGET

    def _baseline(self, sinr):
        """
        CQI and MCS selection out of a probing step, with the legacy BLER
        target. MCS 0 is rejected if MCS 1 does not meet the target either
        """
        rb_map = get_rb_map(sinr)
        max_mcs = self.error_model.max_mcs

        mcs = 0
        bler = 1.
        while mcs <= max_mcs:
            tb_size = self.tb_size_fun(mcs, len(rb_map))
            bler = self.error_model.predict_bler(sinr, rb_map, tb_size, mcs).bler
            if bler > self._target(sinr, rb_map, mcs):
                break
            mcs += 1
        if mcs > 0:
            mcs -= 1

        if bler > LEGACY_BLER_TARGET and mcs == 0:
            cqi = 0
        elif mcs == max_mcs:
            cqi = MAX_CQI
        else:
            cqi = cqi_from_mcs(self.error_model, mcs)
        return cqi, mcs

    def _walk(self, sinr, cqi):
        """
        Evaluate the MCS indices up to the one matching the probing CQI
        """
        rb_map = get_rb_map(sinr)
        probe_bler = []
        for mcs in range(mcs_from_cqi(self.error_model, cqi) + 1):
            tb_size = self.tb_size_fun(mcs, len(rb_map))
            output = self.error_model.predict_bler(sinr, rb_map, tb_size, mcs)
            probe_bler.append(output.bler)
            logger.debug('Probing MCS %d: TB size %d, BLER %.3g',
                         mcs, tb_size, output.bler)
        return probe_bler

    def __call__(self,
                 sinr):
        sinr = check_sinr(sinr)
        state = self.probe_state

        # Nothing allocated: no transition is evaluated
        if len(get_rb_map(sinr)) == 0:
            return 0, 0

        if state is None:
            return self._baseline(sinr)

        if state.step == ProbeStep.OUT_STEP:
            cqi, mcs = self._baseline(sinr)
            state.held_cqi = cqi
            now = self.clock()
            if now - state.last_activation_time <= self.step_frequency:
                return cqi, mcs

            # Step up
            state.step = ProbeStep.IN_STEP
            state.last_activation_time = now
            state.held_cqi = min(MAX_CQI, cqi + self.cqi_gain)
            state.applied_gain = state.held_cqi - cqi
            state.probe_bler = self._walk(sinr, state.held_cqi)
            logger.info('Probing step up at t=%s: CQI %d -> %d',
                        now, cqi, state.held_cqi)
        else:
            now = self.clock()
            if now - state.last_activation_time >= self.step_duration:
                # Step down
                state.step = ProbeStep.OUT_STEP
                state.last_activation_time = now
                state.held_cqi -= state.applied_gain
                logger.info('Probing step down at t=%s: CQI %d',
                            now, state.held_cqi)

        return state.held_cqi, mcs_from_cqi(self.error_model, state.held_cqi)
