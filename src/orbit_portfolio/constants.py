STATE_DIR_NAME = ".orbit"
STATE_DIR_ENV = "ORBIT_STATE_DIR"
CONFIG_FILE = "config.yaml"
PROJECTS_FILE = "projects.yaml"
USERS_FILE = "users.yaml"
LOCK_FILE = "store.lock"
STORE_VERSION = 1
WINDOWS_LOCK_BYTES = 4096

FILTER_ALL = "All"

DEFAULT_CAPACITY_PER_WEEK = 30
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PROJECT_START = "2024-01-01"
DEFAULT_PROJECT_END = "2024-12-31"

SUMMARY_FALLBACK_TEXT = "Failed to generate AI summary."
ASSISTANT_FALLBACK_TEXT = "I'm having trouble connecting to my brain right now. Please try again."
ASSISTANT_CONTEXT_TEMPLATE = "Portfolio Governance view active. Current organizational health is {condition}."
