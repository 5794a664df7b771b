from __future__ import annotations

"""
Domain Constants.

Centralizes the fixed names and markers that define the layout of the
staging area and of the produced job archive.
"""

from typing import List

APP_VERSION = "0.3.0"
CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# ARCHIVE LAYOUT
# -----------------------------------------------------------------------------

ARCHIVE_SUFFIX = "-hdeploy"
ARCHIVE_EXTENSION = ".jar"

MANIFEST_ENTRY_NAME = "META-INF/MANIFEST.MF"
MANIFEST_VERSION = "1.0"

# Read/write buffer used when streaming file content into the archive
STREAM_BUFFER_SIZE = 64 * 1024

# -----------------------------------------------------------------------------
# STAGING LAYOUT
# -----------------------------------------------------------------------------

DEFAULT_OUTPUT_SUBDIR = "hadoop-deploy"
DEFAULT_CLASSES_SUBDIR = "classes"
STAGING_ROOT_NAME = "root"
STAGING_LIB_NAME = "lib"

# -----------------------------------------------------------------------------
# DEPENDENCY EXCLUSION DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_RESERVED_GROUP_PREFIX = "org.apache"
DEFAULT_RESERVED_ARTIFACT_PREFIX = "hadoop"

# Generated runtime-internal stub libraries (JSP API/compiler jars)
STUB_ARTIFACT_PREFIX = "jsp-"

DEFAULT_LIBRARY_EXTENSIONS: List[str] = [".jar"]
DEFAULT_LIBRARY_PACKAGING_TYPES: List[str] = ["jar"]

DEFAULT_EXCLUSION_STRATEGY = "base-name"

DEFAULT_CONFIG_FILENAME = "hdeploy.json"
DEFAULT_PROJECT_FILENAME = "hdeploy-project.json"
