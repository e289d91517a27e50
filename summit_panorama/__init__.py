"""Summit Panorama - compute mountain panoramas from elevation data.

A terrain visibility engine featuring:
- Tiled SRTM elevation models with bilinear interpolation
- Great-circle elevation profiles with curvature and refraction correction
- Bracketing ray casting for horizon scans and summit visibility
- Greedy non-overlapping summit label placement

Modules:
    core: Elevation models, profiles, ray casting and panorama computation
    model: Data structures (GeoPoint, Summit, PanoramaParameters, Panorama)
    labeling: Visible summit selection and label placement

Example:
    from summit_panorama.core.elevation_model import CompositeElevationModel, ContinuousElevationModel
    from summit_panorama.core.panorama_computer import PanoramaComputer
    from summit_panorama.labeling import Labelizer
"""
