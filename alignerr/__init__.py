# -*- coding: utf-8 -*-

"""Top-level package for alignerr."""

__author__ = """Alignerr Team"""
__email__ = 'team@alignerr.dev'
__version__ = '1.0.0'
