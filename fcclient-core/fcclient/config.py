import logging
import os
from typing import List, Optional, Union

from fcclient.constants import (
    CONFIG_FOLDER_NAME,
    DEFAULT_API_VERSION,
    DEFAULT_HTTP_TIMEOUT,
    FALSE_STRINGS,
    LOG_LEVELS,
    TRACE_LOG_LEVELS,
    TRUE_STRINGS,
)


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Get the log type from environment variable"""
    fc_log = os.environ.get(env_var_name, "").lower().strip()
    return fc_log if fc_log in LOG_LEVELS else False


def parse_boolean_env(env_var_name: str) -> Optional[bool]:
    """Parse the value of the given env variable and return True/False, or None if it is not a boolean value."""
    value = os.environ.get(env_var_name, "").lower().strip()
    if value in TRUE_STRINGS:
        return True
    if value in FALSE_STRINGS:
        return False
    return None


def parse_float_env(env_var_name: str, default: float) -> float:
    """Parse the value of the given env variable as a positive number, falling back to the default otherwise."""
    value = os.environ.get(env_var_name, "").strip()
    try:
        result = float(value)
    except ValueError:
        return default
    return result if 0 < result < float("inf") else default


def is_env_true(env_var_name: str) -> bool:
    """Whether the given environment variable has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() in TRUE_STRINGS


def is_env_not_false(env_var_name: str) -> bool:
    """Whether the given environment variable is empty or has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() not in FALSE_STRINGS


def load_environment(profiles: str = None, env=os.environ) -> List[str]:
    """Loads the environment variables from ~/.fcclient/{profile}.env, for each profile listed in the profiles.
    :param env: environment to load profile to. Defaults to `os.environ`
    :param profiles: a comma separated list of profiles to load (defaults to "default")
    :returns str: the list of the actually loaded profiles (might be the fallback)
    """
    if not profiles:
        profiles = "default"

    profiles = [profile.strip() for profile in profiles.split(",")]
    environment = {}
    import dotenv

    for profile in profiles:
        path = os.path.join(CONFIG_DIR, f"{profile}.env")
        if not os.path.exists(path):
            continue
        environment.update(dotenv.dotenv_values(path))

    for k, v in environment.items():
        # we do not want to override the environment
        if k not in env and v is not None:
            env[k] = v

    return profiles


# the configuration profile to load
CONFIG_PROFILE = os.environ.get("CONFIG_PROFILE", "").strip()

# host configuration directory
CONFIG_DIR = os.environ.get("CONFIG_DIR", os.path.expanduser(f"~/{CONFIG_FOLDER_NAME}"))

# keep this on top to populate environment
LOADED_PROFILES = load_environment(CONFIG_PROFILE)

# FC endpoint, e.g. https://<account id>.<region>.fc.aliyuncs.com
ENDPOINT = os.environ.get("ENDPOINT", "").strip()

# credentials used to sign requests
ACCESS_KEY_ID = os.environ.get("ACCESS_KEY_ID", "").strip()
ACCESS_KEY_SECRET = os.environ.get("ACCESS_KEY_SECRET", "").strip()
SECURITY_TOKEN = os.environ.get("SECURITY_TOKEN", "").strip() or None

# region and account, used to build full resource ARNs
REGION = os.environ.get("REGION", "").strip()
ACCOUNT_ID = os.environ.get("ACCOUNT_ID", "").strip()

# API version embedded in every request path
API_VERSION = os.environ.get("FC_API_VERSION", "").strip() or DEFAULT_API_VERSION

# transport timeout (in seconds) of a single request
HTTP_TIMEOUT = parse_float_env("FC_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)

# resources referenced by the tests against a live endpoint
CODE_BUCKET = os.environ.get("CODE_BUCKET", "").strip()
INVOCATION_ROLE = os.environ.get("INVOCATION_ROLE", "").strip()
LOG_PROJECT = os.environ.get("LOG_PROJECT", "").strip()
LOG_STORE = os.environ.get("LOG_STORE", "").strip()

# whether to enable verbose debug logging
FC_LOG = eval_log_type("FC_LOG")
DEBUG = is_env_true("DEBUG") or FC_LOG in TRACE_LOG_LEVELS


def is_trace_logging_enabled():
    if FC_LOG:
        log_level = str(FC_LOG).upper()
        return log_level.lower() in TRACE_LOG_LEVELS
    return False


def has_live_credentials() -> bool:
    """Whether an endpoint and a full set of credentials are configured."""
    return bool(ENDPOINT and ACCESS_KEY_ID and ACCESS_KEY_SECRET)


# set log levels immediately, but will be overwritten later by setup_logging
if DEBUG:
    logging.getLogger("").setLevel(logging.DEBUG)
    logging.getLogger("fcclient").setLevel(logging.DEBUG)

LOG = logging.getLogger(__name__)
