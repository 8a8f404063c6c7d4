"""Command-line interface for flatcache."""
