"""Export of derived dashboard series."""
