#!/usr/bin/env python
from setuptools import setup, find_packages
import os
import re

# Read the version from __init__.py
with open(os.path.join('tictactoe_ai', '__init__.py'), 'r') as f:
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", f.read(), re.M)
    if version_match:
        version = version_match.group(1)
    else:
        version = '0.1.0'  # Default if not found

# Read long description from README.md
with open('README.md', 'r', encoding='utf-8') as f:
    long_description = f.read()

# Core dependencies
install_requires = [
    'numpy>=1.22.0,<3.0.0',  # Board grid storage
    'rich>=12.0.0,<15.0.0',  # Terminal board, tables and log handler
    'tqdm>=4.64.0,<5.0.0',  # Progress bars for game series
]

# Development dependencies
dev_requires = [
    'pytest>=7.0.0,<9.0.0',  # Testing framework
    'pytest-cov>=4.0.0,<6.0.0',  # Test coverage
    'mypy>=1.0.0,<2.0.0',  # Static type checking
    'black>=23.0.0,<25.0.0',  # Code formatting
    'isort>=5.10.0,<6.0.0',  # Import sorting
]

setup(
    name='tictactoe-ai',
    version=version,
    description='A Monte Carlo Tree Search player for tic-tac-toe and larger k-in-a-row boards',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Tic-Tac-Toe AI Team',
    author_email='your-email@example.com',  # Replace with your email
    url='https://github.com/yourusername/tictactoe-ai',  # Replace with your repository URL
    packages=find_packages(include=['tictactoe_ai', 'tictactoe_ai.*']),
    py_modules=['demo_game'],
    install_requires=install_requires,
    extras_require={
        'dev': dev_requires,
        'all': dev_requires,
    },
    entry_points={
        'console_scripts': [
            'tictactoe-play=tictactoe_ai.play:main',
            'tictactoe-demo=demo_game:main',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Education',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Games/Entertainment :: Board Games',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
    ],
    python_requires='>=3.9',
    include_package_data=True,
    keywords='tic-tac-toe, board game, ai, mcts, monte carlo tree search, ucb1',
    project_urls={
        'Bug Reports': 'https://github.com/yourusername/tictactoe-ai/issues',
        'Source': 'https://github.com/yourusername/tictactoe-ai',
    },
)
