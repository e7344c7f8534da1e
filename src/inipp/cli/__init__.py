"""Command line interface for inspecting and normalizing INI files."""

from .main import app
