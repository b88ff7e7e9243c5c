"""Command line front end for nanonet."""
