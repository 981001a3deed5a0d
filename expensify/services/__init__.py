"""Business logic layer: asset and document managers plus external adapters."""
