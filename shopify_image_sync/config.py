"""Configuration for the image sync pipeline."""
import os
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_IMAGES_DIR = './images'
DEFAULT_REQUEST_DELAY = 1.0
DEFAULT_UPLOAD_SUCCESS_CODES = (201,)
DEFAULT_TIMEOUT = 30.0

REQUIRED_VARIABLES = {
    'store_url': 'SHOPIFY_STORE_URL',
    'api_version': 'API_VERSION',
    'access_token': 'SHOPIFY_ACCESS_TOKEN',
}


def normalize_store_url(store_url: str) -> str:
    """Return the store URL as https://<shop>.myshopify.com without a trailing slash."""
    url = store_url.strip().rstrip('/')
    if not url.startswith('https://'):
        url = f"https://{url}"
    if '.' not in url.split('://')[-1]:
        url += '.myshopify.com'
    return url


@dataclass(frozen=True)
class ShopifyConfig:
    """Immutable settings shared by every pipeline component."""
    store_url: str
    api_version: str
    access_token: str
    images_dir: str = DEFAULT_IMAGES_DIR
    request_delay: float = DEFAULT_REQUEST_DELAY
    # Some storage providers answer 204 instead of 201
    upload_success_codes: Tuple[int, ...] = DEFAULT_UPLOAD_SUCCESS_CODES
    timeout: Optional[float] = DEFAULT_TIMEOUT

    @property
    def graphql_url(self) -> str:
        return f"{self.store_url}/admin/api/{self.api_version}/graphql.json"

    def with_overrides(self, **overrides) -> 'ShopifyConfig':
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _parse_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got '{raw}'")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got '{raw}'")
    return value


def _parse_status_codes(name: str, raw: str) -> Tuple[int, ...]:
    try:
        codes = tuple(int(part) for part in raw.split(',') if part.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a comma separated list of status codes, got '{raw}'")
    if not codes:
        raise ConfigurationError(f"{name} must name at least one status code")
    return codes


def load_config(env_file: Optional[str] = None, environ: Optional[Dict[str, str]] = None,
                **overrides) -> ShopifyConfig:
    """
    Build the configuration from the process environment.

    A .env file is loaded first (``env_file`` or the default lookup) without
    overriding variables already set. Passing ``environ`` skips the .env
    lookup entirely and reads only the given mapping. Keyword overrides that
    are not None win over the environment.

    Raises:
        ConfigurationError: if a required variable is missing or a value cannot be parsed.
    """
    if environ is None:
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()
        environ = dict(os.environ)

    missing = [variable for variable in REQUIRED_VARIABLES.values()
               if not (environ.get(variable) or '').strip()]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    config = ShopifyConfig(
        store_url=normalize_store_url(environ[REQUIRED_VARIABLES['store_url']]),
        api_version=environ[REQUIRED_VARIABLES['api_version']].strip(),
        access_token=environ[REQUIRED_VARIABLES['access_token']].strip(),
        images_dir=environ.get('IMAGES_DIR') or DEFAULT_IMAGES_DIR,
        request_delay=_parse_float('UPLOAD_DELAY_SECONDS',
                                   environ.get('UPLOAD_DELAY_SECONDS') or str(DEFAULT_REQUEST_DELAY)),
        upload_success_codes=_parse_status_codes('UPLOAD_SUCCESS_STATUS',
                                                 environ.get('UPLOAD_SUCCESS_STATUS') or '201'),
        timeout=_parse_float('SHOPIFY_REQUEST_TIMEOUT',
                             environ.get('SHOPIFY_REQUEST_TIMEOUT') or str(DEFAULT_TIMEOUT)),
    )
    return config.with_overrides(**overrides)
