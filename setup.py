from setuptools import setup, find_packages

setup(
    name="voice2note",
    version="0.1.0",
    description="Hotkey dictation core: record, transcribe and format speech into notes",
    author="",
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.8.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
        "rich>=12.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "numpy>=1.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "voice2note=voice2note.main:main",
        ],
    },
)
