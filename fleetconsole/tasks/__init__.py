"""Background tasks: metric sampler and retention cleanup."""
