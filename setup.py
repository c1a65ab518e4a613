from setuptools import find_packages, setup

setup(
    name="sofacheck",
    version="0.1.0",
    description="Check a Mac's macOS version against the SOFA macOS data feed",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "requests",
        "PyYAML",
        "platformdirs",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "sofacheck=sofacheck.cli:main",
        ],
    },
)
