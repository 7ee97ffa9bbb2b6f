"""Shared constants for autospec."""

import re

# Feature directories and branches: 003-user-auth
FEATURE_DIR_PATTERN = re.compile(r'^(\d{3})-(.+)$')
FEATURE_NUMBER_WIDTH = 3

SPEC_FILE = "spec.yaml"
PLAN_FILE = "plan.yaml"
TASKS_FILE = "tasks.yaml"
CHECKLISTS_DIR = "checklists"

FEATURE_ENV_VAR = "SPECIFY_FEATURE"

DEFAULT_SPECS_DIR = "./specs"
DEFAULT_STATE_DIR = "~/.autospec/state"
DEFAULT_MAX_HISTORY_ENTRIES = 500

HISTORY_FILE = "history.yaml"

# Git refuses ref names longer than this
MAX_BRANCH_NAME_BYTES = 244
