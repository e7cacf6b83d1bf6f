"""Scraper and parsers for The Mountaineers website."""
