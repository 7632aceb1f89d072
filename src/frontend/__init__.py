"""Textual frontend for the output console."""
