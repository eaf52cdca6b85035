from setuptools import setup, find_packages

VERSION = '0.1.0'
DESCRIPTION = 'A CLI tool for dumping webnovels into Markdown'
LONG_DESCRIPTION = 'This package provides a command-line interface that downloads every chapter of a webnovelpub novel into a single Markdown file.'

# Read from requirements.txt, but filter out comments and empty lines
try:
    with open('requirements.txt', encoding='utf-8') as f:
        install_requires = [line.strip() for line in f if line.strip() and not line.startswith('#')]
except FileNotFoundError:
    install_requires = ['requests', 'beautifulsoup4', 'click']

setup(
    name='webnovel-dumper',
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    packages=find_packages(include=['webnovel_dumper', 'webnovel_dumper.*']),
    install_requires=install_requires,
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'dumper = webnovel_dumper.cli.main:dumper',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: End Users/Desktop',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Topic :: Utilities',
    ],
    python_requires='>=3.9',
)
