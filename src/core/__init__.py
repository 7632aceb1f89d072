"""Core domain package for outputconsole.

Core holds the log registry, read tracking and highlight logic without any
Textual or kernel-specific code, keeping the notification rules portable.
"""
