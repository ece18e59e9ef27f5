"""macutils - disk, installer and compatibility inventory for Macs."""

__version__ = "0.1.0"
