"""
Setup script for faff-finder
Run: pip install -e ".[test]"
"""

from setuptools import find_packages, setup

setup(
    name='faff-finder',
    version='1.0.0',
    description='Find slow periods and recording gaps in ride FIT files',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.9',
    install_requires=[
        'fitparse',
        'pandas',
        'numpy',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'faff-finder=faff_finder.cli:main',
        ],
    },
)
