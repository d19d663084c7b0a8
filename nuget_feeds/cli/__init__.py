"""Command line interface for nuget-feeds."""
