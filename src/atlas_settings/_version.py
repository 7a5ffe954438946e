# src/atlas_settings/_version.py
__version__ = "0.1.0"
