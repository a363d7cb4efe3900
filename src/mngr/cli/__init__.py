"""Interactive command line interface."""
