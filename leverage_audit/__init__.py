"""Founder Leverage Assessment - scoring and derived-metrics engine"""

__version__ = '1.0.0'
