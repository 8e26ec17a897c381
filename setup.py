# setup.py
from setuptools import setup, find_packages

# Version is defined here to avoid import issues during build
__version__ = "3.0.0"

setup(
    name='akcm',
    version=__version__,
    description='Amazon Kids Content Manager - bulk enable or disable content on the parent dashboard.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    author='Bryan Roscoe',
    url='https://github.com/bryanroscoe/amazon-kids-content-manager',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=[
        'click>=8.1.0',
        'rich>=13.0.0',
        'PyYAML>=6.0',
        'pydantic>=2.0',
        'httpx>=0.27',
    ],
    extras_require={
        'browser': [
            'playwright>=1.40',
        ],
        'test': [
            'pytest>=7.0',
            'pytest-asyncio>=0.23',
        ],
    },
    entry_points={
        'console_scripts': [
            'akcm = akcm.cli:cli',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Utilities",
    ],
    python_requires='>=3.10',
    keywords='amazon kids, parental controls, parent dashboard, automation',
)
