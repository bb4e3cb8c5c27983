"""Shared constants used across the application."""

# Repository Constants
# --------------------

GIT_METADATA_DIRECTORY = ".git"
"""Marker directory whose presence identifies a git working copy."""

ADDON_MANIFEST_FILENAME = "package.winccoa.json"
"""Add-on manifest file expected at the root of a marketplace repository."""

FALLBACK_REPOSITORY_NAME_PREFIX = "repo-"
"""Prefix of the time-based name used when no name can be extracted from a URL."""

# Remote Repository Listing Constants
# -----------------------------------

DEFAULT_PAGE_SIZE = 100
"""Repositories requested per page (GitHub's maximum)."""

DEFAULT_MAX_PAGES = 10
"""Hard cap on pages fetched per listing, bounding latency regardless of organization size."""

DEFAULT_ORGANIZATION = "winccoa"
"""Organization listed when the caller names none."""

# Dependency Bootstrap Constants
# ------------------------------

PACKAGE_MANIFEST_FILENAME = "package.json"
"""File whose presence marks a directory as needing install/build."""

JAVASCRIPT_DIRECTORY = "javascript"
"""Sub-project directory searched for package manifests."""

EXCLUDED_WALK_DIRECTORIES = frozenset({"node_modules", GIT_METADATA_DIRECTORY})
"""Dependency-cache and metadata directories never descended into."""

# Sub-project Constants
# ---------------------

PLACEHOLDER_SUBPROJECT_VERSION = "1.0.0"
"""Version used for the placeholder configuration of sub-projects registered without one."""

ASCII_SUCCESS_EXIT_CODES = frozenset({0})
"""ASCII manager exit codes treated as success."""

ASCII_WARNING_EXIT_CODES = frozenset({55})
"""ASCII manager exit codes meaning the import completed with warnings."""

ASCII_COMPONENT_ID = 6
"""Component identifier of the ASCII manager binary."""

# Environment Constants
# ---------------------

WINCCOA_REGISTRY_PATH_TEMPLATE = r"SOFTWARE\ETM\WinCC_OA\{version}"
"""Registry key (under HKEY_LOCAL_MACHINE) holding the WinCC OA installation settings."""

WINCCOA_PROJECT_DIRECTORY_VALUE = "PROJECTDIR"
"""Registry value naming the default project directory."""

DEFAULT_WINCCOA_VERSION = "3.21"
"""WinCC OA version assumed when none is configured."""

DBD_FILES_DIRECTORY = "dbdfiles"
"""Installation directory holding the version-specific data-point definition files."""

DBD_VERSION_DIRECTORY_TEMPLATE = "version_{version}"
"""Per-version subdirectory of DBD_FILES_DIRECTORY."""
