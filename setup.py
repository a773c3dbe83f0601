import os
from setuptools import setup, find_packages

# Find all packages in the current directory
packages = find_packages(exclude=['tests', 'tests.*'])

long_description = ''
if os.path.exists('README.md'):
    long_description = open('README.md', encoding='utf-8').read()

setup(
    name='sqlitequery',
    version='1.0.0',
    description='A Python library for running parameterized queries against SQLite with a reusable compiled statement',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Microsoft Corporation',
    packages=packages,
    include_package_data=True,
    # Requires >= Python 3.10
    python_requires='>=3.10',
    # The SQLite shared library is loaded at runtime through ctypes
    install_requires=[],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Operating System :: Microsoft :: Windows',
        'Operating System :: MacOS',
        'Operating System :: POSIX :: Linux',
    ],
    zip_safe=False,
)
