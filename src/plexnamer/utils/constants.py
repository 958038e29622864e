"""
Constants and configuration settings for TV show renaming.

This module contains the constants used by the parser, the template renderer
and the relocation engine. It includes the known media file extensions, the
default naming templates, probe limits for locked files, disc structure folder
names and the status codes used in relocation results. Environment variables
are read from a local ``.env`` file when one is present.
"""

import os
import re

from dotenv import load_dotenv

load_dotenv()

# Run settings
DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Accepted media file extensions
VIDEO_EXTENSIONS = {
    ".mkv", ".mp4", ".m4v", ".avi", ".mov", ".wmv", ".mpg", ".mpeg", ".ts", ".m2ts",
    ".vob", ".ifo", ".bup", ".bdmv", ".divx", ".flv", ".webm", ".iso", ".ogm",
}
SUBTITLE_EXTENSIONS = {".srt", ".sub", ".idx", ".ass", ".ssa", ".smi", ".vtt", ".sup"}
ARTWORK_EXTENSIONS = {".jpg", ".jpeg", ".png", ".tbn", ".gif", ".bmp", ".webp"}
AUDIO_EXTENSIONS = {".mp3", ".flac", ".m4a", ".wav", ".aac", ".ogg", ".mka"}
NFO_EXTENSIONS = {".nfo"}
TEXT_EXTENSIONS = {".txt"}

# Default naming templates
DEFAULT_SHOW_FOLDER_TEMPLATE = "$N ($Y)"
DEFAULT_SEASON_FOLDER_TEMPLATE = "Season $1"
DEFAULT_FILENAME_TEMPLATE = "$N - S$2E$E - $T"
DEFAULT_SPACE_REPLACEMENT = "_"

# Locked file probing: attempts and seconds between attempts
PROBE_ATTEMPTS = 5
PROBE_DELAY_SECONDS = 1.0

# Filename parsing
MAX_PARSE_DEPTH = 8

# Disc structures
DISC_FOLDER_NAMES = {"BDMV", "VIDEO_TS"}
DVD_FILE_REGEX = re.compile(r"(video_ts|vts_\d\d_\d)\.(vob|bup|ifo)", re.IGNORECASE)
BLURAY_FILE_REGEX = re.compile(r"(index\.bdmv|movieobject\.bdmv|\d{5}\.m2ts)", re.IGNORECASE)

# Stacking markers (cd1, part 2, disc a, 1of2 ...)
STACKING_REGEXES = [
    re.compile(r"(.*?)[ _.-]+((?:cd|dvd|p(?:ar)?t|dis[ck])[ _.-]*[1-9])(\.[^.]+)$", re.IGNORECASE),
    re.compile(r"(.*?)[ _.-]+((?:cd|dvd|p(?:ar)?t|dis[ck])[ _.-]*[a-d])(\.[^.]+)$", re.IGNORECASE),
    re.compile(r"(.*?)[ (_.-]+([1-9][ .]?of[ .]?[1-9])[ )_-]?(\.[^.]+)$", re.IGNORECASE),
]

# Media file name markers
EXTRAS_REGEX = re.compile(r".*[ _.-]extras[ _.-](.*)", re.IGNORECASE)
TRAILER_REGEX = re.compile(r"[ _.-]trailer$", re.IGNORECASE)
SAMPLE_REGEX = re.compile(r"(^|[ _.-])sample$", re.IGNORECASE)
SUBTITLE_LANGUAGE_REGEX = re.compile(r"\.([a-z]{2,3})(\.forced)?$", re.IGNORECASE)

# Message channel
MESSAGE_FAILED_RENAME = "message.renamer.failedrename"

# Relocation status codes
STATUS_OK = "OK"
STATUS_SKIP = "SKIP"
STATUS_MOVED = "MOVED"
STATUS_MISSING = "MISSING"
STATUS_LOCKED = "LOCKED"
STATUS_FAIL = "FAIL"
