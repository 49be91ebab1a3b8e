"""Setup script for tts_preference package."""

from setuptools import setup, find_packages

setup(
    name="tts-preference",
    version="0.1.0",
    description="Statistics for A/B preference tests of text-to-speech models",
    author="TTS Evaluation Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
    ],
    extras_require={
        "viz": ["matplotlib>=3.7.0"],
        "dev": ["pytest>=7.3.0", "scipy>=1.10.0", "matplotlib>=3.7.0", "black>=23.0.0", "mypy>=1.0.0"],
    },
    entry_points={
        "console_scripts": [
            "tts-preference=tts_preference.cli:main",
        ],
    },
)
