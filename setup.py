from setuptools import setup, find_packages

setup(
    name="repodeps",
    version="0.1.0",
    description="Resolve, clone and build graphs of inter-dependent git repositories.",
    author="repodeps developers",
    license="GPL-3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "rich>=13.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "repodeps=repodeps.modules.cli:main",
        ],
    },
)
