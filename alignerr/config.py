# -*- coding: utf-8 -*-

"""User configuration: config.yml in the app directory, overridden by
ALIGNERR_* environment variables."""

import os
import logging

import click
import yaml

from .constants import APP_NAME, USER_CONFIG, DEFAULT_BASE_PATH, \
                       BASE_PATH_ENV, SOURCE_PATH_ENV
from .exceptions import ConfigError
from .utils import ConfigDictMixin, mkdir_p

logger = logging.getLogger(__name__)


class AlignerrConfig(ConfigDictMixin):
    """Holds user configuration from config.yml"""

    def __init__(self, base_path=DEFAULT_BASE_PATH, source_path=''):
        self.base_path = base_path or DEFAULT_BASE_PATH
        self.source_path = source_path or ''

    def apply_environment(self, environ=None):
        """Let non-empty ALIGNERR_* variables override file settings."""

        if environ is None:
            environ = os.environ

        if environ.get(BASE_PATH_ENV):
            self.base_path = environ[BASE_PATH_ENV]
        if environ.get(SOURCE_PATH_ENV):
            self.source_path = environ[SOURCE_PATH_ENV]

        return self

    def save_to_file(self, config_file):
        yaml.safe_dump(self.to_config_dict(), config_file,
                       default_flow_style=False)

    @classmethod
    def load_from_file(cls, config_file):
        """Load configuration from a file-like object as yaml."""

        try:
            config_dict = yaml.safe_load(config_file)
        except yaml.YAMLError as err:
            raise ConfigError('Could not parse configuration: {}'.format(err))

        if config_dict is None:
            return cls()
        if not isinstance(config_dict, dict):
            raise ConfigError('Configuration must be a mapping')

        try:
            return cls.from_config_dict(config_dict)
        except ValueError as err:
            raise ConfigError(str(err))


def get_config_location():
    config_dir = click.get_app_dir(APP_NAME, force_posix=True)
    config_path = os.path.join(config_dir, USER_CONFIG)
    return config_dir, config_path


def load_config(config_path=None, environ=None):
    """
    Load config.yml if it exists, then apply environment overrides.
    A missing file means defaults.
    """

    if config_path is None:
        _, config_path = get_config_location()

    try:
        with open(config_path) as config_file:
            config = AlignerrConfig.load_from_file(config_file)
    except FileNotFoundError:
        logger.debug('no configuration at %s, using defaults', config_path)
        config = AlignerrConfig()

    return config.apply_environment(environ)


def save_config(config, config_path=None):
    if config_path is None:
        config_dir, config_path = get_config_location()
    else:
        config_dir = os.path.dirname(config_path)

    if config_dir:
        mkdir_p(config_dir)

    with open(config_path, 'w') as config_file:
        config.save_to_file(config_file)

    return config_path
