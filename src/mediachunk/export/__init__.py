"""Preview and per-chunk audio rendering."""
