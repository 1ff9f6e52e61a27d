from __future__ import annotations

import matplotlib
matplotlib.use('Agg')  # headless
import matplotlib.pyplot as plt
from .analysis import hist_256, low_bit_plane
from .lsb import ImageLike


def plot_histograms(img_before: ImageLike, img_after: ImageLike, out_path: str) -> None:
    hb = hist_256(img_before)
    ha = hist_256(img_after)
    ch_keys = sorted(hb.keys())
    n = len(ch_keys)
    fig, axs = plt.subplots(n, 1, figsize=(8, 3 * n), tight_layout=True)
    if n == 1:
        axs = [axs]
    for i, k in enumerate(ch_keys):
        axs[i].plot(hb[k], label='cover')
        axs[i].plot(ha[k], label='stego')
        axs[i].set_title(f'Histogram {k}')
        axs[i].legend()
    fig.savefig(out_path)
    plt.close(fig)


def plot_low_bit_planes(img_before: ImageLike, img_after: ImageLike, bits: int, out_path: str) -> None:
    pb = low_bit_plane(img_before, bits)
    pa = low_bit_plane(img_after, bits)
    fig, axs = plt.subplots(1, 2, figsize=(8, 4), tight_layout=True)
    axs[0].imshow(pb, cmap='gray', vmin=0, vmax=1)
    axs[0].set_title(f'Low {bits} bit(s), cover')
    axs[0].axis('off')
    axs[1].imshow(pa, cmap='gray', vmin=0, vmax=1)
    axs[1].set_title(f'Low {bits} bit(s), stego')
    axs[1].axis('off')
    fig.savefig(out_path)
    plt.close(fig)
