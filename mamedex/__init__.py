"""
mamedex - MAME metadata merger and exporter

Reads the MAME XML catalog together with the community side-files
(catver.ini, series.ini, languages.ini, nplayers.ini, history.xml and the
resources dat), merges them into a single machine catalog, filters and
normalizes it, and exports it to CSV, JSON and SQLite.
"""

__version__ = "0.3.0"
__author__ = "jbruns"
