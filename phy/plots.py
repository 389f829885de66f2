# © 2025 NVIDIA CORPORATION & AFFILIATES

"""
Plotting utilities
"""

import matplotlib.pyplot as plt
import numpy as np


def plot_results(sinr_db : list[float],
                 hist : dict[str, dict[str, np.ndarray]],
                 bler_target : float | None = None,
                 legends : dict[str, str] | None = None,
                 colors : dict[str, str] | None = None,
                 linewidths : dict[str, float] | None = None,
                 fs : dict[str, float] | None = None,
                 plot_only : list[str] | None = None):
    """
    Plot the CQI/MCS decisions of adaptive modulation and coding policies
    over a SINR trace

    Input
    -----
        sinr_db: `list` of `float`
            SINR trace [dB]

        hist: `dict` of `dict` of `np.ndarray`
            For each policy label, the history returned by `run_amc`

        bler_target: `float` (default: `None`)
            If provided, drawn as a reference on the BLER panel

        legends: `dict` of `str` (default: `None`)
            Legends for the plots

        colors: `dict` of `str` (default: `None`)
            Colors for the plots

        linewidths: `dict` of `float` (default: `None`)
            Linewidths for the plots

        fs: `dict` of `float` (default: `None`)
            Font size for the plots

        plot_only: `list` of `str` (default: `None`)
            List of labels to plot. If `None`, all labels are plotted

    Output
    ------
        fig: `matplotlib.figure.Figure`
            Figure object
    """
    n_slots = len(sinr_db)
    labels = plot_only if plot_only is not None else list(hist.keys())
    if fs is None:
        fs = {'ylabel': 15, 'xlabel': 15, 'tick': 13, 'legend': 13}
    if legends is None:
        legends = {lab: lab for lab in labels}
    if colors is None:
        colors = {lab: f'C{ii}' for ii, lab in enumerate(labels)}
    if linewidths is None:
        linewidths = {lab: 1 for lab in labels}

    fig, axs = plt.subplots(4, 1, figsize=(8, 10), sharex=True)

    axs[0].plot(sinr_db, 'k')
    axs[0].set_ylabel('SINR [dB]', fontsize=fs['ylabel'])

    for lab in labels:
        kwargs = {'color': colors[lab], 'linewidth': linewidths[lab]}
        axs[1].step(np.arange(n_slots), hist[lab]['cqi'], where='post',
                    label=legends[lab], **kwargs)
        axs[2].step(np.arange(n_slots), hist[lab]['mcs'], where='post', **kwargs)
        axs[3].semilogy(np.maximum(hist[lab]['bler'], 1e-6), **kwargs)

    if bler_target is not None:
        axs[3].plot(bler_target * np.ones(n_slots), '--k', label='BLER target')
        axs[3].legend(fontsize=fs['legend'])

    axs[1].set_ylabel('CQI', fontsize=fs['ylabel'])
    axs[1].set_ylim(-.5, 15.5)
    axs[1].legend(fontsize=fs['legend'], loc='lower right')
    axs[2].set_ylabel('MCS index', fontsize=fs['ylabel'])
    axs[3].set_ylabel('Predicted \n BLER', fontsize=fs['ylabel'])
    axs[3].set_xlabel('Slot', fontsize=fs['xlabel'])

    for ax in axs:
        ax.grid()
        ax.tick_params(axis='both', labelsize=fs['tick'])

    fig.tight_layout()
    return fig
