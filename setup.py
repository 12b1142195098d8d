"""Setup module for chanmodes."""

from setuptools import setup
from codecs import open
from os import path

curdir = path.abspath(path.dirname(__file__))

with open(path.join(curdir, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='chanmodes',
    version='0.1.0-dev1',

    description='IRC channel mode and prefix tracking',
    long_description=long_description,
    long_description_content_type='text/markdown',

    # Choose your license
    license='MPL 2.0',

    # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        'Development Status :: 3 - Alpha',

        'Intended Audience :: Developers',
        'Topic :: Communications :: Chat :: Internet Relay Chat',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)',

        'Programming Language :: Python :: 3',
    ],

    keywords='IRC chat modes',
    install_requires=['pyyaml'],

    # Folders (packages of code)
    packages=['chanmodes'],

    # Data files
    data_files=[('share/chanmodes', ['example-conf.yml'])],
)
