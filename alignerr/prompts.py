"""Interactive fallbacks for values not given on the command line"""

import sys

import click

from .exceptions import PromptError
from .paths import filename_from_path


def prompt_for_value(provided, label):
    """
    Return `provided' if it is non-empty. Otherwise ask the operator,
    failing if the session is noninteractive or no answer is given.
    """

    if provided:
        return provided

    if not sys.stdin.isatty():
        raise PromptError('{} is required'.format(label))

    try:
        value = click.prompt(label, default='', show_default=False)
    except click.Abort:
        raise PromptError('{} is required'.format(label))

    value = value.strip()
    if not value:
        raise PromptError('{} is required'.format(label))

    return value


def prompt_for_uuid(provided_uuid=None):
    return prompt_for_value(provided_uuid, 'Task UUID')


def prompt_for_filename(provided_filename=None, source_path=None):
    """
    Return the archive filename. Without an explicit name, derive one
    from the source folder, and only ask if there is no source either.
    """

    if provided_filename:
        return provided_filename

    if source_path:
        return filename_from_path(source_path)

    return prompt_for_value(None, 'Tar filename (e.g., submission.tar)')
