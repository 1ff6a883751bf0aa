"""Bundled data files for capctl."""
