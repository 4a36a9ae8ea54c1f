"""Report renderers — Rich terminal and JSON."""
