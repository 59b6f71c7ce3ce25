"""Ports - interfaces offered by and required by GPU discovery."""
