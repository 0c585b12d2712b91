"""Configuration constants for gitqa."""

import os

from dotenv import load_dotenv

# Load .env file from project root
load_dotenv()

# Keywords that mark a commit as a defect fix
DEFAULT_KEYWORDS = ["fix", "hotfix", "bugfix", "resolve", "patch"]

# Keywords that mark a merge as a regular (non-hot) fix
FIX_FAMILY_KEYWORDS = ["fix", "bugfix", "resolve", "patch"]

# Number of hotspot files reported per ranking
DEFAULT_TOP_FILES_LIMIT = 10

# Day bucket for commits whose date cannot be parsed
UNKNOWN_BUCKET = "unknown"

# Repository / output settings
DEFAULT_BRANCH = os.getenv("GITQA_BRANCH", "HEAD")
DEFAULT_OUTPUT_DIR = os.getenv("GITQA_OUTPUT_DIR", "git-qa-report")
ENV_KEYWORDS = os.getenv("GITQA_KEYWORDS")
