# setup.py
from setuptools import setup, find_packages

setup(
    name='TMCDButils',
    version='1.0',
    packages=find_packages(include=['TMCDButils', 'TMCDButils.*']),
    install_requires=[
        'pymongo>=4.6',
        'pydantic>=2.6',
        'pyyaml>=6.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'tmcdb = TMCDButils.cli.main:main',
        ],
    },
)
