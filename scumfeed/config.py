"""
SCUM Feed - Configuration
JSON configuration file with environment overrides for secrets
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConfigError
from .models.source import SinkChannel, Source

logger = logging.getLogger(__name__)

# Log directory below a SCUM dedicated server install
LOG_SUBDIRECTORY = Path('SCUM') / 'Saved' / 'SaveFiles' / 'Logs'

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

ENV_PREFIX = 'SCUMFEED_'
ENV_SUFFIX = '_WEBHOOK'


@dataclass
class Settings:
    log_directory: Path
    state_directory: Path = Path('state')
    poll_interval: float = 10.0
    dispatch_timeout: float = 10.0
    encoding: str = 'utf-16'
    log_level: str = 'INFO'
    log_file: Optional[str] = None
    cursor_store: str = 'json'
    mongo_uri: Optional[str] = None
    mongo_database: str = 'scumfeed'
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    categories: Dict[str, Dict[str, Any]] = field(default_factory=dict)


def configure_logging(level: str = 'INFO', log_file: Optional[str] = None):
    """Install the root log handler (console, or file when log_file is set)"""
    options = {
        'format': LOG_FORMAT,
        'datefmt': DATE_FORMAT,
        'level': getattr(logging, str(level).upper(), logging.INFO),
    }
    if log_file:
        options['filename'] = log_file
        options['filemode'] = 'a'
    logging.basicConfig(**options)

    # Keep library chatter out of the feed log
    logging.getLogger('apscheduler').setLevel(logging.WARNING)
    logging.getLogger('discord').setLevel(logging.WARNING)


def load_settings(path, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read the configuration file; ConfigError when it is missing or invalid"""
    environ = os.environ if environ is None else environ
    config_path = Path(path)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {config_path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}")

    if not isinstance(config, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")

    if config.get('log_directory'):
        log_directory = Path(config['log_directory'])
    elif config.get('server_directory'):
        log_directory = Path(config['server_directory']) / LOG_SUBDIRECTORY
    else:
        raise ConfigError("Either server_directory or log_directory must be set")

    categories = config.get('categories') or {}
    if not isinstance(categories, dict):
        raise ConfigError("categories must be an object keyed by category name")

    try:
        settings = Settings(
            log_directory=log_directory,
            state_directory=Path(config.get('state_directory', 'state')),
            poll_interval=float(config.get('poll_interval', 10)),
            dispatch_timeout=float(config.get('dispatch_timeout', 10)),
            encoding=config.get('encoding', 'utf-16'),
            log_level=environ.get('SCUMFEED_LOG_LEVEL') or config.get('log_level', 'INFO'),
            log_file=config.get('log_file'),
            cursor_store=config.get('cursor_store', 'json'),
            mongo_uri=environ.get('SCUMFEED_MONGO_URI') or config.get('mongo_uri'),
            mongo_database=config.get('mongo_database', 'scumfeed'),
            username=config.get('username'),
            avatar_url=config.get('avatar_url'),
            categories={name: dict(options or {}) for name, options in categories.items()},
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid setting in {config_path}: {e}")

    if settings.cursor_store not in ('json', 'mongo'):
        raise ConfigError(f"cursor_store must be 'json' or 'mongo', not {settings.cursor_store!r}")
    if settings.cursor_store == 'mongo' and not settings.mongo_uri:
        raise ConfigError("cursor_store 'mongo' needs mongo_uri (or SCUMFEED_MONGO_URI)")

    # Webhooks supplied through the environment (SCUMFEED_<CATEGORY>_WEBHOOK)
    for key, value in environ.items():
        if key.startswith(ENV_PREFIX) and key.endswith(ENV_SUFFIX) and value:
            name = key[len(ENV_PREFIX):-len(ENV_SUFFIX)].lower()
            if name:
                settings.categories.setdefault(name, {})['webhook_url'] = value

    return settings


def resolve_channel(name: str, options: Dict[str, Any]) -> Optional[SinkChannel]:
    """Webhook of a category, or None (logged) when missing or malformed"""
    try:
        if options.get('webhook_url'):
            return SinkChannel.from_url(options['webhook_url'])
        if options.get('webhook_id') and options.get('webhook_token'):
            return SinkChannel(int(options['webhook_id']), str(options['webhook_token']))
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid webhook for {name}: {e}")
    return None


def build_sources(settings: Settings, categories) -> List[Source]:
    """
    One Source per known category

    Categories missing from the configuration are built disabled
    """
    sources = []
    for name, category in categories.items():
        options = settings.categories.get(name, {})
        try:
            poll_interval = float(options.get('poll_interval', settings.poll_interval))
        except (TypeError, ValueError):
            logger.error(f"Invalid poll_interval for {name}, using {settings.poll_interval}")
            poll_interval = settings.poll_interval

        sources.append(Source(
            name=name,
            directory=settings.log_directory,
            pattern=options.get('pattern', category.pattern),
            encoding=options.get('encoding', settings.encoding),
            enabled=bool(options.get('enabled', bool(options))),
            channel=resolve_channel(name, options),
            suppress=frozenset(options.get('suppress') or ()),
            poll_interval=poll_interval,
        ))

    unknown = set(settings.categories) - set(categories)
    for name in sorted(unknown):
        logger.warning(f"Ignoring unknown category in configuration: {name}")

    return sources
