# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
Adaptive modulation and coding: BLER target policies, CQI probing and the
AMC dispatcher.
"""

from .lookup import cqi_from_spectral_efficiency, mcs_from_spectral_efficiency, \
    cqi_from_mcs, mcs_from_cqi
from .template import BlerTargetSearch, CqiPolicy, get_rb_map
from .policies import FixedLegacyPolicy, FixedTargetPolicy, \
    ExponentialTargetPolicy, HybridTargetPolicy
from .probing import ProbingPolicy, ProbeState, ProbeStep
from .amc import AMC, AMC_MODELS, POLICIES

__all__ = ['AMC', 'AMC_MODELS', 'POLICIES', 'BlerTargetSearch', 'CqiPolicy',
           'FixedLegacyPolicy', 'FixedTargetPolicy', 'ExponentialTargetPolicy',
           'HybridTargetPolicy', 'ProbingPolicy', 'ProbeState', 'ProbeStep',
           'cqi_from_spectral_efficiency', 'mcs_from_spectral_efficiency',
           'cqi_from_mcs', 'mcs_from_cqi', 'get_rb_map']
