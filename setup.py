"""MoodPlay - Setup configuration."""

import os
import re

from setuptools import find_packages, setup

here = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(here, "moodplay_core", "__init__.py"), encoding="utf-8") as f:
    version = re.search(r'^__version__ = "([^"]+)"', f.read(), re.M).group(1)

setup(
    name="moodplay",
    version=version,
    author="MoodPlay Team",
    description="Emotion-driven music playback and session analytics",
    packages=find_packages(include=["moodplay_core", "moodplay_core.*", "moodplay_cli", "moodplay_cli.*"]),
    python_requires=">=3.9",
    install_requires=[
        "structlog>=23.1.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.0.0",
        "httpx>=0.25.0",
        "click>=8.1.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-cov>=4.0",
            "respx>=0.20",
        ],
    },
    entry_points={
        "console_scripts": [
            "moodplay=moodplay_cli.main:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio :: Players",
    ],
    include_package_data=True,
    zip_safe=False,
)
