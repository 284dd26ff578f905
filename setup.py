import re
from pathlib import Path

from setuptools import find_packages, setup

root_dir = Path(__file__).parent.resolve()
readme_contents = (root_dir / 'README.md').read_text(encoding='utf8')
version_match = re.search(r'^VERSION = "([^"]+)"', (root_dir / 'ghxsim' / 'constants.py').read_text(), re.MULTILINE)

short_description = """A time-stepped ground heat exchanger model for vertical borehole
fields and slinky coil fields, driven by the loop inlet temperature."""

setup(
    name='ghxsim',
    install_requires=[
        'click>=8.1.3',
        'jsonschema>=4.17.3',
        'numpy>=1.24.2',
        'pygfunction>=2.2.2',
        'scipy>=1.10.0',
        'SecondaryCoolantProps>=1.3',
    ],
    extras_require={
        'test': ['pytest>=7.2'],
    },
    description=short_description,
    license='BSD-3',
    long_description=readme_contents,
    long_description_content_type='text/markdown',
    version=version_match.group(1),
    packages=find_packages(include=['ghxsim', 'ghxsim.*']),
    include_package_data=True,
    package_data={'ghxsim': ['schemas/*.json']},
    entry_points={
        'console_scripts': ['ghxsim=ghxsim.main:run_manager_from_cli']
    },
    python_requires='>=3.10',
    classifiers=[
        'Topic :: Scientific/Engineering',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12'
    ]
)
