# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
PHY-side models and utilities for adaptive modulation and coding: BLER
curves, effective SINR mapping, error models and transport block sizing.
"""

from .bler_curves import Sigmoid, BlerCurves
from .misc import lin_to_db, db_to_lin, get_bler_sigmoid_params, \
    SimulationClock, run_amc, rescale, generate_ar
from .eesm import EESM
from .error_model import ErrorModel, ErrorModelOutput, TableErrorModel, \
    NrErrorModel, LteErrorModel, DIRECTIONS
from .tb_size import TransportBlockSize
from .plots import plot_results
