"""Host discovery: hardware facts, disks, installers and applications."""
from macutils.discovery.applications import ApplicationScanner
from macutils.discovery.hwdetect import SystemDetector
from macutils.compat.model_year import ModelCompatibilityEngine
from macutils.discovery.scanner import DiskScanner, build_scanner, start_discovery

__all__ = [
    'ApplicationScanner',
    'DiskScanner',
    'ModelCompatibilityEngine',
    'SystemDetector',
    'build_scanner',
    'start_discovery',
]
