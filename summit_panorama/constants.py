"""Configuration constants for Summit Panorama.

All tunable parameters are centralized here for easy tuning.

Classes:
    DEMConfig: Elevation tile layout and naming
    EarthConfig: Earth model used for distances and curvature
    ProfileConfig: Elevation profile sampling
    RayConfig: Ray casting step sizes and visibility tolerance
    LabelConfig: Summit label placement in image pixels
"""


class DEMConfig:
    """Elevation tile layout (SRTM HGT format)."""

    # Samples per degree of latitude/longitude (1 arc-second SRTM)
    # A tile holds (N + 1) x (N + 1) samples: both borders are included
    SAMPLES_PER_DEGREE = 3600

    # Samples are 16-bit signed big-endian integers, row-major, north row first
    SAMPLE_DTYPE = ">i2"
    BYTES_PER_SAMPLE = 2

    # Tile names look like "N46E007.hgt": hemisphere, 2-digit latitude,
    # hemisphere, 3-digit longitude, suffix
    TILE_NAME_LENGTH = 11
    TILE_SUFFIX = ".hgt"
    TILE_NAME_PATTERN = r"^([NS])(\d{2})([EW])(\d{3})\.hgt$"

    @staticmethod
    def tile_byte_length(samples_per_degree: int) -> int:
        """Expected byte length of one tile: 2 * (N + 1)^2."""
        return DEMConfig.BYTES_PER_SAMPLE * (samples_per_degree + 1) ** 2


assert DEMConfig.tile_byte_length(DEMConfig.SAMPLES_PER_DEGREE) == 25_934_402
assert len("N00E000" + DEMConfig.TILE_SUFFIX) == DEMConfig.TILE_NAME_LENGTH


class EarthConfig:
    """Spherical Earth model and atmospheric refraction."""

    # Earth's radius in meters (spherical approximation)
    EARTH_RADIUS_M = 6_371_000

    # Refraction of visible light reduces the apparent curvature of the earth
    # 0 = no refraction, 1/7 ~ 0.14 = common rule of thumb for visible light
    REFRACTION_COEFFICIENT = 0.13


class ProfileConfig:
    """Elevation profile sampling along a great circle."""

    # Geodesic positions are computed exactly every SAMPLE_SPACING_M meters
    # and linearly interpolated in between
    SAMPLE_SPACING_M = 4096

    # Half width of the window used for the along-profile slope
    SLOPE_HALF_SPAN_M = 32.0


class RayConfig:
    """Ray casting parameters.

    The root search is a bracketing search: the reported obstruction is the
    left bound of the first step containing a sign change, so the error is at
    most one step. Thin obstructions narrower than a step can be missed.
    """

    # Horizon scan (one ray per pixel): coarse bracket, then bisection
    HORIZON_SCAN_STEP_M = 64
    HORIZON_REFINE_STEP_M = 4

    # Point-to-point summit visibility test
    SUMMIT_SCAN_STEP_M = 64
    # A summit is visible if nothing obstructs the ray before distance - tolerance
    SUMMIT_TOLERANCE_M = 200


assert RayConfig.HORIZON_REFINE_STEP_M < RayConfig.HORIZON_SCAN_STEP_M
assert RayConfig.SUMMIT_TOLERANCE_M > RayConfig.SUMMIT_SCAN_STEP_M, "Tolerance must absorb one coarse step"


class LabelConfig:
    """Summit label placement parameters (image pixels)."""

    # Summits closer than this to the top of the image leave no room for text
    ABOVE_BORDER_PX = 170
    # Summits closer than this to the left/right image border are not labelled
    SIDE_BORDER_PX = 20
    # Horizontal space reserved by one label
    LABEL_WIDTH_PX = 20
    # Minimum length of the leader line of the highest label
    MIN_LINE_LENGTH_PX = 20
    # Gap between the label baseline and the top of the leader line
    LINE_TO_SUMMIT_PX = 2
    # Text is drawn rotated by this angle around its anchor
    TEXT_ROTATION_DEG = -60
