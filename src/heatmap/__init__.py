"""Global temperature heat map: grid, batched fetch, normalization, overlay, runs."""
