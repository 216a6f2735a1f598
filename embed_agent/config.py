#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Configuration Module

Loads the application configuration. Values are layered:
- Built-in defaults
- An optional YAML file (``--config`` or ``EMBED_AGENT_CONFIG``)
- ``EMBED_AGENT_*`` environment variables
"""

import copy
import logging
import os
from typing import Dict, Any, List, Optional, Mapping

import yaml

from embed_agent.utils.http_utils import DEFAULT_USER_AGENT, DOCUMENT_TIMEOUT, MAX_REDIRECTS, OEMBED_TIMEOUT

logger = logging.getLogger('config')

CONFIG_ENV_VAR = 'EMBED_AGENT_CONFIG'

DEFAULT_CONFIG: Dict[str, Any] = {
    'server': {
        'host': '0.0.0.0',
        'port': 3001,
        'cors_origins': ['http://localhost:3000', 'http://localhost:19006'],
        'trusted_proxies': [],
    },
    'rate_limit': {
        'enabled': True,
        'max_requests': 100,
        'window_seconds': 900,
    },
    'fetch': {
        'timeout': DOCUMENT_TIMEOUT,
        'oembed_timeout': OEMBED_TIMEOUT,
        'max_redirects': MAX_REDIRECTS,
        'user_agent': DEFAULT_USER_AGENT,
    },
    'generic': {
        'merge_policy': 'gaps_only',
        'strict': False,
    },
    'logging': {
        'level': 'INFO',
        'file': None,
    },
}


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


# env var -> (section, key, converter)
ENV_OVERRIDES = {
    'EMBED_AGENT_HOST': ('server', 'host', str),
    'EMBED_AGENT_PORT': ('server', 'port', int),
    'EMBED_AGENT_CORS_ORIGINS': ('server', 'cors_origins', _split_list),
    'EMBED_AGENT_TRUSTED_PROXIES': ('server', 'trusted_proxies', _split_list),
    'EMBED_AGENT_RATE_LIMIT_MAX': ('rate_limit', 'max_requests', int),
    'EMBED_AGENT_RATE_LIMIT_WINDOW': ('rate_limit', 'window_seconds', int),
    'EMBED_AGENT_LOG_LEVEL': ('logging', 'level', str.upper),
    'EMBED_AGENT_MERGE_POLICY': ('generic', 'merge_policy', str),
}


class ConfigError(ValueError):
    """The configuration file or an override is invalid."""


def deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge ``override`` into a copy of ``base``, recursing into nested dicts.

    Args:
        base: Base configuration
        override: Values that take precedence

    Returns:
        New merged dictionary
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_yaml_file(path: str) -> Dict[str, Any]:
    """
    Read a YAML configuration file.

    Args:
        path: File path

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        ConfigError: the file cannot be read or is not a mapping
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    return data


def apply_env_overrides(config: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ

    for name, (section, key, convert) in ENV_OVERRIDES.items():
        raw = environ.get(name)
        if raw is None or raw == '':
            continue
        try:
            config.setdefault(section, {})[key] = convert(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {name}: {raw!r}") from e
        logger.debug(f"Applied {name} override")

    return config


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Build the effective configuration.

    Args:
        path: YAML file path; defaults to ``$EMBED_AGENT_CONFIG`` when set
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        Configuration dictionary
    """
    environ = os.environ if environ is None else environ
    path = path or environ.get(CONFIG_ENV_VAR)

    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        config = deep_merge(config, load_yaml_file(path))
        logger.info(f"Loaded configuration from {path}")

    return apply_env_overrides(config, environ)
