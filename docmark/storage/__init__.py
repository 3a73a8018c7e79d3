"""Output store, incremental cache, and filename mapping."""
