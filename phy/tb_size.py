# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
Transport block size computation
"""

import math

from phy.error_model import ErrorModel, DIRECTIONS

SUBCARRIERS_PER_RB = 12


class TransportBlockSize:
    """
    Computes the transport block (TB) size for a given MCS index and number
    of resource blocks (RBs). Unless the error model is the legacy one, the
    parity bits are subtracted from the payload: one CRC for the TB, or one
    CRC per code block if the TB is segmented into multiple code blocks.

    Parameters
    ----------
        error_model : `ErrorModel`
            Error model providing payload and code block sizes

        crc_len : `int` (default: 24)
            Length of each CRC [bits]

        num_ref_sc_per_rb : `int` (default: 1)
            Number of subcarriers per RB carrying reference signals

        direction : 'dl' | 'ul' (default: 'dl')
            Link direction

    Input
    -----
        mcs : `int`
            MCS index

        num_rb : `int`
            Number of allocated RBs

    Output
    ------
        tb_size : `int`
            Transport block size [bits]
    """

    def __init__(self,
                 error_model: ErrorModel,
                 crc_len: int = 24,
                 num_ref_sc_per_rb: int = 1,
                 direction: str = 'dl'):
        if not isinstance(error_model, ErrorModel):
            raise ValueError('error_model must be an instance of ErrorModel')
        self.error_model = error_model
        self.crc_len = crc_len
        self.num_ref_sc_per_rb = num_ref_sc_per_rb
        self.direction = direction

    @property
    def crc_len(self):
        """ Get/set the CRC length [bits] """
        return self._crc_len

    @crc_len.setter
    def crc_len(self, value):
        if value < 0:
            raise ValueError('crc_len must be non-negative')
        self._crc_len = int(value)

    @property
    def num_ref_sc_per_rb(self):
        """ Get/set the number of reference subcarriers per RB """
        return self._num_ref_sc_per_rb

    @num_ref_sc_per_rb.setter
    def num_ref_sc_per_rb(self, value):
        if not 0 <= value < SUBCARRIERS_PER_RB:
            raise ValueError(f'num_ref_sc_per_rb must be in [0, {SUBCARRIERS_PER_RB - 1}]')
        self._num_ref_sc_per_rb = int(value)

    @property
    def direction(self):
        """ Get/set the link direction """
        return self._direction

    @direction.setter
    def direction(self, value):
        if value not in DIRECTIONS:
            raise ValueError(f'Invalid direction: {value}. Must be one of {DIRECTIONS}')
        self._direction = value

    def payload_size(self, mcs, num_rb):
        """ Payload size [bits] before parity accounting """
        return self.error_model.payload_size(
            SUBCARRIERS_PER_RB - self.num_ref_sc_per_rb,
            mcs,
            num_rb,
            self.direction)

    def __call__(self,
                 mcs,
                 num_rb):
        if not 0 <= mcs <= self.error_model.max_mcs:
            raise ValueError(f'MCS index must be in [0, {self.error_model.max_mcs}], got {mcs}')
        if num_rb < 0:
            raise ValueError('num_rb must be non-negative')

        payload_size = self.payload_size(mcs, num_rb)
        tb_size = payload_size
        if self.error_model.is_legacy:
            return tb_size

        # Transport block CRC
        if payload_size >= self.crc_len:
            tb_size = payload_size - self.crc_len

        # Code block segmentation, decided on the size before resizing
        cb_size = self.error_model.max_code_block_size(payload_size, mcs)
        if tb_size > cb_size:
            num_cb = math.ceil(tb_size / cb_size)
            tb_size = payload_size - num_cb * self.crc_len
        return tb_size
