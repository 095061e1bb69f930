"""iplookup — IP address metadata lookup API."""

__version__ = "0.1.0"
