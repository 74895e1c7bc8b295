"""Command line entry points for the one-pager backend."""
