"""Post-processing applied to the rendered HTML body."""
