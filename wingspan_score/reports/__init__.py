"""Report builders for ranked games."""
