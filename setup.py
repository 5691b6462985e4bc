from setuptools import setup, find_packages
from pathlib import Path

# Read requirements.txt for the install_requires field
with open(Path(__file__).parent / 'requirements.txt') as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith('#')]

# Read README.md if it exists
readme_path = Path(__file__).parent / 'README.md'
long_description = readme_path.read_text() if readme_path.exists() else 'UDP remote control for a hint display'

setup(
    name='hint_server',
    version='1.0.0',
    description='Listens for UDP commands and shows hints, backgrounds and media on a display.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    package_dir={'': 'src'},  # Tells setuptools packages are under src
    packages=find_packages(where='src',),  # Find packages in src
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'hint-server=hint_server.hint_server_app:main',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: POSIX :: Linux',
    ],
    python_requires='>=3.9'
)
