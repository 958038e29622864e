"""
A TV show renaming package for Plex style libraries.

This package infers season and episode numbers from raw filenames, renders
destination folder and file names from token templates, and relocates media
files (or whole DVD/Blu-ray folder structures) on disk while keeping every
episode record that references a moved file up to date.

The package is organized into several categories:
- Data model for shows, episodes and media files.
- Parsing, rendering and relocation under `plexnamer.rename`.
- Constants, settings, logging, messages and file helpers under `plexnamer.utils`.
"""

__version__ = "1.0.0"

# Debug flag for controlling verbose output
DEBUG: bool = False

__all__ = ["__version__", "DEBUG"]
