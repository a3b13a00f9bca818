"""Changelog generation from individual YAML entry files."""