MAX_CONFIG_SIZE_BYTES = 1024 * 1024  # 1 MB
DEFAULT_CONFIG_FILENAME = ".stackref.yaml"
DEFAULT_ENV_PREFIX = "STACKREF_"
