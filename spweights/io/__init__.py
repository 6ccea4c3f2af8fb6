from .readers import read_coordinates, read_units

__all__ = ["read_coordinates", "read_units"]
