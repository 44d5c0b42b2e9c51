"""
Station and space-time plots for hillslope solver results.

Usage:
    python -m hillslope.plot_stations results/solution.h5
    python -m hillslope.plot_stations results/solution.h5 --save
"""

import os
import sys

import h5py
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap


def create_blue_white_colormap():
    """Create a custom colormap: white (low) to dark blue (high)."""
    colors = ['#ffffff', '#f7fbff', '#deebf7', '#c6dbef', '#9ecae1', '#6baed6', '#3182bd', '#08519c']
    return LinearSegmentedColormap.from_list('white_blue', colors, N=256)


def load_results(h5_file: str) -> dict:
    """Read a solution.h5 file into a dict of arrays and attributes."""
    with h5py.File(h5_file, 'r') as f:
        return {
            "x": f['mesh/x'][:],
            "time": f['solution/time'][:],
            "h": f['solution/h'][:],
            "stations": f['stations/position'][:],
            "station_h": f['stations/height'][:],
            "crest": f.attrs.get('crest_elevation', np.nan),
            "overtop_time": f.attrs.get('overtop_time', np.nan),
            "rain_duration": f.attrs.get('rain_duration', np.nan),
            "scheme": f.attrs.get('iteration_scheme', 'unknown'),
            "dt": f.attrs.get('time_step', 0.0),
            "dx": f.attrs.get('dx', 0.0),
        }


def plot_stations(h5_file: str, save_fig: bool = False, output_file: str = None):
    """Plot the water table at each station and the space-time diagram.

    Args:
        h5_file: Path to HDF5 results file
        save_fig: Whether to save figure to file (default: False, shows interactively)
        output_file: Optional output filename, always placed in plots/
    """
    os.makedirs("plots", exist_ok=True)

    print(f"Loading data from {h5_file}...")
    data = load_results(h5_file)
    time, x = data["time"], data["x"]
    print(f"Data loaded: {time.shape[0]} reported times, {x.shape[0]} nodes")

    fig, (ax_series, ax_main) = plt.subplots(2, 1, figsize=(12, 10),
                                             gridspec_kw={"height_ratios": [1, 1]})

    colors = plt.cm.viridis(np.linspace(0, 1, len(data["stations"])))
    for k, (position, color) in enumerate(zip(data["stations"], colors)):
        ax_series.plot(time, data["station_h"][:, k], linewidth=1.5, color=color,
                       label=f'{position:g} from weir')

    ax_series.axhline(data["crest"], color='k', linestyle='--', linewidth=1, label='Weir crest')
    if np.isfinite(data["overtop_time"]):
        ax_series.axvline(data["overtop_time"], color='r', linestyle=':', label='Overtop')
    if np.isfinite(data["rain_duration"]):
        ax_series.axvspan(time[0], min(data["rain_duration"], time[-1]), color='b', alpha=0.05,
                          label='Rain')
    ax_series.set_xlabel('Time', fontsize=11)
    ax_series.set_ylabel('Water table', fontsize=11)
    ax_series.set_title('Water Table at Stations', fontsize=12, fontweight='bold')
    ax_series.legend(loc='best', fontsize=9, ncol=2)
    ax_series.grid(True, alpha=0.3)

    X, T = np.meshgrid(x, time)
    im = ax_main.pcolormesh(X, T, data["h"], cmap=create_blue_white_colormap(), shading='auto')
    ax_main.set_xlabel('Distance from weir', fontsize=11)
    ax_main.set_ylabel('Time', fontsize=11)
    ax_main.set_title('Space-Time Diagram', fontsize=12, fontweight='bold')
    plt.colorbar(im, ax=ax_main, label='Water table')

    fig.text(0.02, 0.01, f'Scheme: {data["scheme"]}, dx={data["dx"]:.4f}, dt={data["dt"]:.6f}',
             fontsize=9, family='monospace')
    plt.suptitle('1D Hillslope Flow', fontsize=16, fontweight='bold')

    if save_fig:
        if output_file is None:
            output_file = os.path.basename(h5_file).replace('.h5', '_stations.png')
        output_file = f"plots/{os.path.basename(output_file)}"
        plt.savefig(output_file, dpi=300, bbox_inches='tight')
        print(f"Saved figure to: {output_file}")
    else:
        print("Displaying plot (close window to continue)...")
        plt.show()


def main():
    """Main function for command-line usage."""
    if len(sys.argv) < 2:
        print("Usage:")
        print("  Display plot:        python -m hillslope.plot_stations results/solution.h5")
        print("  Save plot:           python -m hillslope.plot_stations results/solution.h5 --save")
        print("\nOptions:")
        print("  --save               Save figure instead of showing")
        print("  --output FILE        Custom output filename")
        sys.exit(1)

    save_fig = '--save' in sys.argv
    output_file = None

    if '--output' in sys.argv:
        idx = sys.argv.index('--output')
        if idx + 1 < len(sys.argv):
            output_file = sys.argv[idx + 1]
            save_fig = True

    plot_stations(sys.argv[1], save_fig=save_fig, output_file=output_file)


if __name__ == "__main__":
    main()
