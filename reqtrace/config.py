"""Global configuration: paths, constants, settings."""

from pathlib import Path

# Artifact folders created inside every project
REQUIREMENTS_DIR = "requirements"
USECASES_DIR = "usecases"
TESTCASES_DIR = "testcases"
INFORMATION_DIR = "information"

ARTIFACT_DIRS = (REQUIREMENTS_DIR, USECASES_DIR, TESTCASES_DIR, INFORMATION_DIR)

# Artifacts are stored as Markdown documents
ARTIFACT_EXTENSION = ".md"

# Identity stamped on commits and baselines unless configured otherwise
DEFAULT_AUTHOR_NAME = "ReqTrace User"
DEFAULT_AUTHOR_EMAIL = "user@reqtrace.local"

# Shown when a commit carries no author name
UNKNOWN_AUTHOR = "Unknown"

# Branch that head points at in a freshly initialised repository
DEFAULT_BRANCH = "main"

# Per-project settings folder
SETTINGS_DIR = Path(".reqtrace")
