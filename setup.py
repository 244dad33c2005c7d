#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""The setup script."""

from setuptools import setup, find_packages

with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('HISTORY.rst') as history_file:
    history = history_file.read()

requirements = [
    'click>=7.0',
    'GitPython>=3.1.30',
    'PyYAML>=5.1',
    'arrow>=1.0',
    'pathspec>=0.10',
]

test_requirements = [
    'pytest>=6.0',
]

setup(
    name='alignerr',
    version='1.0.0',
    description="alignerr snapshots a source tree for a task and checks "
                "later edits against that snapshot.",
    long_description=readme + '\n\n' + history,
    author="Alignerr Team",
    author_email='team@alignerr.dev',
    packages=find_packages(include=['alignerr', 'alignerr.*']),
    entry_points={
        'console_scripts': [
            'alignerr=alignerr.cli:cli'
        ]
    },
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        'test': test_requirements,
    },
    python_requires='>=3.8',
    license="Apache Software License 2.0",
    zip_safe=False,
    keywords='alignerr',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
    ],
    test_suite='tests',
)
