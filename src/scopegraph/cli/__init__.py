"""scopegraph command-line interface."""
