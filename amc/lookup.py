# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
Conversions between spectral efficiency, CQI and MCS indices
"""

MAX_CQI = 15


def cqi_from_spectral_efficiency(error_model, se):
    """
    Highest CQI whose required spectral efficiency is strictly lower than
    `se`
    """
    assert se >= 0, f'Spectral efficiency must be non-negative, got {se}'
    cqi = 0
    while cqi < MAX_CQI and \
            error_model.spectral_efficiency_for_cqi(cqi + 1) < se:
        cqi += 1
    return cqi


def mcs_from_spectral_efficiency(error_model, se):
    """
    Scan the MCS table upward while the next MCS has a spectral efficiency
    strictly lower than `se`
    """
    assert se >= 0, f'Spectral efficiency must be non-negative, got {se}'
    mcs = 0
    while mcs < error_model.max_mcs and \
            error_model.spectral_efficiency_for_mcs(mcs + 1) < se:
        mcs += 1
    return mcs


def cqi_from_mcs(error_model, mcs):
    """
    Highest CQI whose required spectral efficiency does not exceed the
    nominal spectral efficiency of `mcs`
    """
    se = error_model.spectral_efficiency_for_mcs(mcs)
    cqi = 0
    while cqi < MAX_CQI and \
            error_model.spectral_efficiency_for_cqi(cqi + 1) <= se:
        cqi += 1
    return cqi


def mcs_from_cqi(error_model, cqi):
    """
    MCS index matching the spectral efficiency of `cqi`: scan the MCS table
    upward while the next MCS does not exceed it
    """
    if not 0 <= cqi <= MAX_CQI:
        raise ValueError(f'CQI index must be in [0, {MAX_CQI}], got {cqi}')
    se = error_model.spectral_efficiency_for_cqi(cqi)
    mcs = 0
    while mcs < error_model.max_mcs and \
            error_model.spectral_efficiency_for_mcs(mcs + 1) <= se:
        mcs += 1
    return mcs
