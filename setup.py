from setuptools import setup, find_packages


setup(
    name="debpkg",
    version="0.1",
    packages=find_packages(include=["debpkg", "debpkg.*"]),
    description="Streaming reader for ar archives and Debian binary packages.",
    author="vercingetorx",
    python_requires=">=3.9",
    install_requires=[
        "pycryptodomex>=3.23.0",
        "zstandard>=0.22.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "debpkg=debpkg.cli:main",
        ]
    },
)
