# -*- coding: utf-8 -*-

"""Command-line interface to alignerr."""
import sys
import logging
from functools import update_wrapper

import click

from . import __version__
from .config import AlignerrConfig, load_config, save_config, \
                    get_config_location
from .exceptions import AlignerrError
from .submission import SubmissionManager, STATE_ABSENT

pass_manager = click.make_pass_decorator(SubmissionManager)


def report_errors(func):
    """
    Turn AlignerrErrors raised by a command into ClickExceptions, so
    they print a message and exit with status 1.
    """

    def replacement(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AlignerrError as err:
            message = err.message
            if err.verbose:
                message += '\n' + err.verbose.strip()
            raise click.ClickException(message)

    # Without update_wrapper() here, click gets confused and puts
    # a replacement subcommand in the help output
    return update_wrapper(replacement, func)


@click.group()
@click.version_option(__version__, prog_name='alignerr')
@click.option('-v', '--verbose', is_flag=True, help='Log debugging output.')
@click.pass_context
def cli(ctx, verbose):
    """
    alignerr, snapshots and diffs for reviewed tasks.

    \b
    example workflow:
        $ cd ~/code/my-project
        $ alignerr submission --init --uuid 1234-abcd
        (make your edits)
        $ alignerr submission --final
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        config = load_config()
    except AlignerrError as err:
        raise click.ClickException(err.message)

    ctx.obj = SubmissionManager(config)


@cli.command()
def setup():
    """Configure default base and source paths."""
    if not sys.stdin.isatty():
        raise click.ClickException('Cannot setup configuration interactively '
                                   'in a noninteractive session')

    try:
        current = load_config(environ={})
    except AlignerrError:
        current = AlignerrConfig()

    base_path = click.prompt('Base path for submissions',
                             default=current.base_path)
    source_path = click.prompt('Default source path (press enter to use the '
                               'current directory)',
                               default=current.source_path,
                               show_default=bool(current.source_path))

    config_path = save_config(AlignerrConfig(base_path, source_path))
    click.echo('Saved configuration to {}'.format(config_path))


@cli.command()
@click.option('--init', 'do_init', is_flag=True,
              help='Initialize a new submission')
@click.option('--final', 'do_final', is_flag=True,
              help='Finalize the submission: create and check the diff')
@click.option('--file', 'filename', metavar='FILENAME',
              help='Tar filename (e.g., submission.tar). Defaults to the '
                   'source folder name.')
@click.option('--uuid', 'task_id', metavar='UUID',
              help='Task UUID. Will prompt if missing')
@click.option('--source', metavar='PATH',
              help='Source directory. Defaults to $ALIGNERR_SOURCE_PATH, '
                   'then the current directory.')
@click.option('--clean', is_flag=True,
              help="Delete today's submission directory before init")
@pass_manager
@report_errors
def submission(manager, do_init, do_final, filename, task_id, source, clean):
    """Manage alignerr submissions."""
    if do_init and do_final:
        raise click.UsageError('Use either --init or --final, not both')

    if do_init:
        init_submission(manager, filename, task_id, source, clean)
    elif do_final:
        finalize_submission(manager, source)
    else:
        click.echo('Please use --init to initialize a submission or --final '
                   'to finalize it')


def init_submission(manager, filename, task_id, source, clean):
    click.echo('Initializing alignerr submission...\n')
    if clean:
        click.echo('Clean mode enabled - will delete existing files\n')

    result = manager.init(filename=filename, task_id=task_id, source=source,
                          clean=clean)

    if result.cleaned:
        click.echo('Cleaned existing directory: {}'
                   .format(result.submission_dir))
    click.echo('Created directory: {}'.format(result.submission_dir))
    click.echo('Created tar file: {}'.format(result.archive_path))
    click.echo('Source directory: {}'.format(result.source_path))
    click.echo('Current commit: {}'.format(result.commit_hash))
    click.echo('Task UUID: {}'.format(result.task_id))
    click.secho('\nSubmission initialized successfully!', fg='green')


def finalize_submission(manager, source):
    click.echo('Finalizing alignerr submission...\n')

    result = manager.finalize(source=source)

    click.echo('Found initial commit hash: {}'.format(result.commit_hash))
    click.echo('Found task UUID: {}'.format(result.task_id))
    click.echo('Created diff file: {}'.format(result.home_diff_path))
    click.echo('Saved diff to submission folder: {}\n'
               .format(result.diff_path))

    if result.apply_result.success:
        click.secho('Diff applied successfully!', fg='green')
        click.echo('All changes are compatible with the initial submission.')
    else:
        click.secho('Failed to apply diff.', fg='red')
        click.echo('Reason:')
        click.echo(result.apply_result.message)
        click.secho('\nThis might indicate conflicts or incompatible '
                    'changes.', fg='yellow')

    click.secho('\nSubmission finalized successfully!', fg='green')


@cli.command()
@pass_manager
@report_errors
def status(manager):
    """Show the state of today's submission directory."""
    result = manager.status()

    click.echo('{}: {}'.format(result.submission_dir, result.state))
    if result.state != STATE_ABSENT:
        click.echo('Commit: {}'.format(result.metadata.commit_hash))
        click.echo('Task UUID: {}'.format(result.metadata.task_id))


@cli.command('config')
@pass_manager
def show_config(manager):
    """Print the active configuration."""
    _, config_path = get_config_location()
    click.echo('Config file: {}'.format(config_path))
    click.echo('Base path: {}'.format(manager.config.base_path))
    click.echo('Source path: {}'.format(manager.config.source_path or
                                        '(current directory)'))
