#!/usr/bin/env python3
import logging

import matplotlib.pyplot as plt
import matplotlib.animation as animation

from chladni_model import ChladniModel
from logging_config import setup_logging

# — Session settings —
shape      = "rectangle"     # rectangle, circle or guitar
material   = "Copper"
freq       = 1200            # drive frequency (Hz)
x0, y0     = 0.03, 0.05      # driver location, plate-centred (m)
grains     = 10000
seed       = 42

# — Animation settings —
frames     = 600
interval   = 1000 / 60       # ms per frame
dt         = interval / 1000
curve_samples = 400

if __name__ == "__main__":
    setup_logging(logging.INFO)

    model = ChladniModel(shape=shape, material=material, grain_count=grains, seed=seed)
    model.set_frequency(freq)
    model.set_excitation(x0, y0)
    model.play()

    fig, (ax, ax_curve) = plt.subplots(1, 2, figsize=(12, 6))
    ax.set_aspect('equal')
    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
    xmin, ymin, xmax, ymax = model.boundary.bounds()
    pad = 0.05 * max(xmax - xmin, ymax - ymin)
    ax.set_xlim(xmin - pad, xmax + pad)
    ax.set_ylim(ymin - pad, ymax + pad)
    for loop in model.boundary.outline():
        ax.plot(loop[:, 0], loop[:, 1], color='k', lw=1)
    ax.plot(*model.excitation, 'r+', ms=10)

    positions = model.particle_positions
    sand = ax.scatter(positions[:, 0], positions[:, 1], s=0.5, c='goldenrod')
    title = ax.set_title("")

    freqs, strength = model.resonance_curve_data(curve_samples)
    curve_line, = ax_curve.plot(freqs, strength, color='tab:blue')
    ax_curve.axvline(model.frequency, color='r', ls='--')
    ax_curve.set_xlabel("Frequency (Hz)")
    ax_curve.set_ylabel("Normalized strength")
    ax_curve.set_ylim(0, 1.05)

    def update(frame):
        model.step(dt)
        sand.set_offsets(model.particle_positions)
        title.set_text(f"{model.material.name}, {model.frequency:.0f} Hz, "
                       f"{model.actual_particle_count} grains")
        return sand, title

    anim = animation.FuncAnimation(fig, update, frames=frames, interval=interval, blit=False)
    plt.tight_layout()
    plt.show()
