"""Directus TypeForge command line tool."""
