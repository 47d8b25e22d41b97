from setuptools import setup, find_packages

setup(
    name="stream-distinct",
    version="0.1.0",
    description="Single-pass distinct-count estimation with (epsilon, delta) guarantees",
    author="adamfilli",
    packages=find_packages(include=["streamdistinct", "streamdistinct.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
