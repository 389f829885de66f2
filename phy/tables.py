# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
MCS, CQI and EESM calibration tables
"""

import numpy as np

# 3GPP TS 38.214 Table 5.1.3.1-1 (MCS index table 1, up to 64QAM)
# Modulation order Qm for MCS 0..28
NR_MCS_MOD_ORDER = np.array([2] * 10 + [4] * 7 + [6] * 12)

# Target code rate x 1024 for MCS 0..28
NR_MCS_CODE_RATE = np.array([
    120, 157, 193, 251, 308, 379, 449, 526, 602, 679,
    340, 378, 434, 490, 553, 616, 658,
    438, 466, 517, 567, 616, 666, 719, 772, 822, 873, 910, 948]) / 1024

NR_MCS_SPECTRAL_EFFICIENCY = NR_MCS_MOD_ORDER * NR_MCS_CODE_RATE

# 3GPP TS 38.214 Table 5.2.2.1-2 (CQI table 1). CQI 0 is "out of range"
NR_CQI_MOD_ORDER = np.array([0] + [2] * 6 + [4] * 3 + [6] * 6)

# Code rate x 1024 for CQI 0..15, shared with the MCS table where the
# modulation order matches
NR_CQI_CODE_RATE = np.array([
    0, 78, 120, 193, 308, 449, 602,
    378, 490, 616,
    466, 567, 666, 772, 873, 948]) / 1024

NR_CQI_SPECTRAL_EFFICIENCY = NR_CQI_MOD_ORDER * NR_CQI_CODE_RATE

# Legacy LTE tables (TS 36.213), MCS 0..28 and CQI 0..15
LTE_MCS_SPECTRAL_EFFICIENCY = np.array([
    0.15, 0.19, 0.23, 0.31, 0.38, 0.49, 0.6, 0.74, 0.88, 1.03,
    1.18, 1.33, 1.48, 1.7, 1.91, 2.16, 2.41, 2.57, 2.73, 3.03,
    3.32, 3.61, 3.9, 4.21, 4.52, 4.82, 5.12, 5.33, 5.55])

LTE_CQI_SPECTRAL_EFFICIENCY = np.array([
    0.0, 0.15, 0.23, 0.38, 0.6, 0.88, 1.18, 1.48,
    1.91, 2.41, 2.73, 3.32, 3.9, 4.52, 5.12, 5.55])

# EESM calibration factor beta, one per MCS of NR table 1
EESM_BETA_TABLE1 = np.array([
    1.6, 1.61, 1.63, 1.65, 1.67, 1.7, 1.73, 1.76, 1.79, 1.82,
    3.97, 4.27, 4.71, 5.16, 5.66, 6.16, 6.5,
    9.95, 10.97, 12.92, 14.96, 17.06, 19.33, 21.85, 24.51, 27.14,
    29.94, 32.05, 34.28])

# Sigmoid approximation of the code block BLER curves vs. effective SINR [dB]:
# BLER = 1 - sigmoid((SINR_eff_dB - center) / scale)
NR_BLER_SIGMOID_PARAMS = {
    'center': np.array([
        -6.0, -4.9, -3.9, -2.8, -1.8, -0.8, 0.2, 1.2, 2.1, 3.0,
        3.3, 4.0, 5.0, 5.9, 6.9, 7.9, 8.6,
        9.0, 9.7, 10.8, 11.9, 12.9, 14.0, 15.1, 16.2, 17.3, 18.4,
        19.2, 20.1]),
    'scale': np.full(29, .5)
}

LTE_BLER_SIGMOID_PARAMS = {
    'center': NR_BLER_SIGMOID_PARAMS['center'] + .5,
    'scale': np.full(29, .6)
}
