"""
Synoptic: Conservation Unit / Population Reconciliation Pipeline

This package reconciles the CU and population datasets behind the synoptic
salmon status dashboard (lookups, metric series, time series, map layers and
the stream selector network) into one consistent, read-only snapshot.
"""

__version__ = "1.0.0"
__author__ = "Synoptic Data Team"
