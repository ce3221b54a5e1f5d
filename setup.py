# setup.py
from setuptools import setup, find_packages

setup(
    name="keysample",
    version="0.1.0",
    description="Estimate the shape of a Redis data set by sampling random keys.",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "redis>=4.0",
        "tqdm>=4.60",
        "setproctitle>=1.2",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "keysample=keysample.cli:main",
        ],
    },
)
