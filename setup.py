from setuptools import setup, find_packages

setup(
    name="lrclib-lyrics",
    version="0.1.0",
    description="Parse plain, LRC and word-timed karaoke lyrics and solve lrclib.net proof-of-work challenges",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "regex",
        "requests",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "lrclib-lyrics=lrclib_lyrics.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Text Processing",
    ],
    keywords="lyrics lrc karaoke lrclib proof-of-work",
)
