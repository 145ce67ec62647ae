"""
Setup script for semdiff package.
"""

from setuptools import setup, find_packages

setup(
    name="semdiff",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        # Core numerical dependencies
        "numpy>=1.20.0",
        "pandas>=1.3.0",

        # Data model
        "pydantic>=2.0.0",

        # Utilities
        "pyyaml>=6.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0.0",
            "scipy>=1.7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'semdiff=semdiff.__main__:main',
        ],
    },
    description="Response normalization, aggregation and clustering for semantic-differential surveys",
    keywords="survey, semantic differential, clustering, statistics",
    python_requires=">=3.8",
)
