"""
Chladni Plate Constants

Tweakable physics, range and animation parameters shared by the plate fields,
boundary shapes and the particle ensemble. All lengths are in meters and all
coordinates are plate-centred: (0, 0) is the middle of the plate.
"""

import numpy as np

TWO_PI = 2 * np.pi

# — PLATE DIMENSIONS —
DEFAULT_PLATE_WIDTH   = 0.32    # Plate width a (m), along x
DEFAULT_PLATE_HEIGHT  = 0.32    # Plate height b (m), along y
MIN_PLATE_SIZE_RATIO  = 0.5
MIN_PLATE_WIDTH       = DEFAULT_PLATE_WIDTH * MIN_PLATE_SIZE_RATIO
MIN_PLATE_HEIGHT      = DEFAULT_PLATE_HEIGHT * MIN_PLATE_SIZE_RATIO

# — DAMPING —
DAMPING_COEFFICIENT   = 0.02    # gamma = DAMPING_COEFFICIENT / sqrt(a*b)

# — DRIVE FREQUENCY (Hz) —
FREQUENCY_MIN         = 50.0
FREQUENCY_MAX         = 4000.0
FREQUENCY_DEFAULT     = 500.0

# — MODAL TRUNCATION —
MAX_MODE              = 16      # m, n = 0..MAX_MODE
MODE_STEP             = 1       # 1 keeps odd modes needed by off-centre drives
SOURCE_THRESHOLD      = 0.001   # skip modes with |cos(m*pi*x0/a)cos(n*pi*y0/b)| below this
SOURCE_THRESHOLD_SQUARED = SOURCE_THRESHOLD ** 2
NORMALIZATION_NUMERATOR  = 4    # (2/sqrt(ab))^2 = 4/(ab)

# — CIRCULAR PLATE MODES —
CIRCULAR_MAX_M        = 8       # angular orders m = 0..CIRCULAR_MAX_M
CIRCULAR_MAX_N        = 8       # radial zeros per angular order

# — PARTICLE ANIMATION —
PARTICLE_STEP_SCALE   = 0.3     # step = 0.3 * |psi| * (dt * 60) * 0.01 meters
STEP_TIME_SCALE       = 0.01
TARGET_FPS            = 60

# — EXCITATION —
DEFAULT_EXCITATION_X  = 0.0
DEFAULT_EXCITATION_Y  = 0.0

# — RESONANCE CURVE —
GRAPH_WINDOW_WIDTH    = 500.0   # Visible window of the resonance graph (Hz)
CURVE_SAMPLES_PER_HZ  = 4
TOTAL_CURVE_SAMPLES   = int((FREQUENCY_MAX - FREQUENCY_MIN) * CURVE_SAMPLES_PER_HZ)

# — GRAIN COUNTS —
GRAIN_COUNT_OPTIONS   = (1000, 5000, 10000, 25000)
DEFAULT_GRAIN_COUNT   = GRAIN_COUNT_OPTIONS[2]

# — CIRCULAR / ANNULAR PLATE —
DEFAULT_OUTER_RADIUS  = 0.16
MIN_OUTER_RADIUS      = 0.08
MAX_OUTER_RADIUS      = 0.20
DEFAULT_INNER_RADIUS  = 0.0
MIN_INNER_RADIUS      = 0.0
MAX_INNER_RADIUS      = 0.15
MIN_ANNULAR_GAP       = 0.02

# — GUITAR (POLYGON) PLATE —
GUITAR_BASE_WIDTH     = 0.24    # Body width at scale 1.0 (m)
GUITAR_BASE_HEIGHT    = 0.32    # Body height at scale 1.0 (m)
DEFAULT_GUITAR_SCALE  = 1.0
MIN_GUITAR_SCALE      = 0.6
MAX_GUITAR_SCALE      = 1.4

# Distance (m) a clamped point is pulled inside a curved or polygonal edge
EDGE_TOLERANCE        = 1e-9
