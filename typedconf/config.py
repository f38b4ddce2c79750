import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
	"""
	typedconf package-level configuration variables.
	All settings can be overridden via environment variables.

	Environment Variables:
	----------------------
	TYPEDCONF_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO
	TYPEDCONF_LOG_JSON: Render log lines as JSON instead of console output. Default: false
	TYPEDCONF_KEY_DELIMITER: Separator between path segments of configuration keys. Default: ':'
	"""
	LOG_LEVEL = os.getenv('TYPEDCONF_LOG_LEVEL', 'INFO').upper()
	LOG_JSON = _env_flag('TYPEDCONF_LOG_JSON')
	KEY_DELIMITER = os.getenv('TYPEDCONF_KEY_DELIMITER', ':')


def set_config(env) -> Config:
    """
    Sets the configuration based on the environment.

    All environment-specific behavior is controlled via environment variables,
    this function only validates the environment name.

    Parameters
    ----------
    env : `str`
        Environment identifier ('dev', 'test', 'prod').

    Returns
    ----------
    Config : `Config`
        Configuration object with settings loaded from environment variables.

    Raises
    ----------
        ValueError : If the specified environment is not recognized.
    """
    valid_environments = {'dev', 'test', 'prod'}
    if env not in valid_environments:
        raise ValueError(f"Unknown environment: {env}. Supported environments are: {valid_environments}.")

    return Config()
