"""
Field Visualization

Renders the scalar fields of each snapshot as images with matplotlib,
one panel per field, and saves them as PNG.
"""

import os

import matplotlib.pyplot as plt
import numpy as np

from .base import OutputSink

DIVERGING_FIELDS = ("u", "v")


def symmetric_limit(data):
    """Largest finite magnitude in `data`, 1.0 if there is none or it is zero."""
    finite = np.abs(data[np.isfinite(data)])
    return float(finite.max()) if finite.size and finite.max() > 0.0 else 1.0


class FieldPlotWriter(OutputSink):
    """
    Saves one PNG per snapshot, ``<prefix>_<iteration>.png``.

    Parameters
    ----------
    directory : str
        Output directory, created on first snapshot
    prefix : str
        File name prefix
    cmap : str
        Colormap for non-velocity fields
    dpi : int
        Resolution of the saved figure
    """

    def __init__(self, directory=".", prefix="lbm_fields", cmap="viridis", dpi=100):
        self.directory = directory
        self.prefix = prefix
        self.cmap = cmap
        self.dpi = dpi
        self.path = None
        self._grid = None
        self._fields = None
        self._iteration = None

    def begin_snapshot(self, grid, iteration):
        self._grid = grid
        self._iteration = iteration
        self._fields = []
        self.path = os.path.join(self.directory, f"{self.prefix}_{iteration}.png")

    def write_scalar(self, name, values, dtype="double"):
        if self._fields is None:
            raise RuntimeError("write_scalar called outside of a snapshot")
        data = np.fromiter((values(c) for c in self._grid.ids()),
                           dtype=np.float64, count=self._grid.size())
        self._fields.append((name, data.reshape(self._grid.shape)))

    def finish_snapshot(self):
        fields, self._fields = self._fields, None
        if not fields:
            return

        height, width = self._grid.shape
        fig, axes = plt.subplots(len(fields), 1, squeeze=False,
                                 figsize=(8, max(2.0, 8 * height / width) * len(fields)))

        for ax, (name, data) in zip(axes[:, 0], fields):
            if name in DIVERGING_FIELDS:
                vmax = symmetric_limit(data)
                im = ax.imshow(data, origin='lower', cmap='RdBu_r',
                               vmin=-vmax, vmax=vmax, aspect='equal')
            else:
                im = ax.imshow(data, origin='lower', cmap=self.cmap, aspect='equal')
            ax.set_title(f'{name} (iteration {self._iteration})')
            plt.colorbar(im, ax=ax, label=name)

        plt.tight_layout()

        os.makedirs(self.directory, exist_ok=True)
        try:
            fig.savefig(self.path, dpi=self.dpi, bbox_inches='tight')
        finally:
            plt.close(fig)
