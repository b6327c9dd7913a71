from platformdirs import user_config_path

PACKAGE_NAME = "staticconfig"  # Python package name

# -----------------------------------------------------------------------------
# User-writable directories
# -----------------------------------------------------------------------------

# Base config directory (e.g. ~/.config/staticconfig/)
USER_CONFIG_DIR = user_config_path(PACKAGE_NAME, appauthor=False)

# Suffix appended to every configuration key
CONFIG_SUFFIX = ".json"
