"""Platform channels and the outbound delivery pipeline."""
