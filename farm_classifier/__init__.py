"""Farm / forest land-cover classifier.

Azure Functions service that accepts a field boundary polygon, asks
Google Earth Engine for the dominant ESA WorldCover class inside it,
and measures the polygon when the class is cropland or forest.
"""

__version__ = "0.1.0"
