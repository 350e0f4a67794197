"""Command line tools for DUET."""
