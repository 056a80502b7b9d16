# SPDX-License-Identifier: AGPL-3.0-or-later
"""Installer for the jivesearch package."""

from setuptools import setup, find_packages

VERSION_TAG = "0.1.0"
GIT_URL = "https://github.com/jivesearch/jivesearch"

with open('README.rst', encoding='utf-8') as f:
    long_description = f.read()

with open('requirements.txt') as f:
    requirements = [l.strip() for l in f.readlines() if l.strip() and not l.startswith('#')]

with open('requirements-dev.txt') as f:
    dev_requirements = [l.strip() for l in f.readlines() if l.strip() and not l.startswith('#')]

setup(
    name='jivesearch',
    description="Query router of a search engine: bangs, instant answers and the fall through to search.",
    long_description=long_description,
    license="AGPL-3.0-or-later",
    author='Jive Search',
    python_requires=">=3.10",
    version=VERSION_TAG,
    keywords='search bangs instant-answers router',
    url=GIT_URL,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Topic :: Internet",
        "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    project_urls={"Code": GIT_URL},
    entry_points={
        'console_scripts': [
            'jivesearch-run = jivesearch.webapp:run',
            'jivesearch-bangs = jivesearch.bangs.cli:app',
        ]
    },
    packages=find_packages(
        include=[
            'jivesearch',
            'jivesearch.*',
        ]
    ),
    package_data={
        'jivesearch': [
            'settings.yml',
        ],
    },
    install_requires=requirements,
    extras_require={'test': dev_requirements},
)
