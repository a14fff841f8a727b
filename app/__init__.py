"""Command-line front end for Balance Service."""
