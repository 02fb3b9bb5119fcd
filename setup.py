from setuptools import setup, find_packages

setup(
    name="airport-queue",
    version="0.1.0",
    description="Discrete event simulation of fare-class airport queues and servers",
    packages=find_packages(include=["airportqueue", "airportqueue.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["airportqueue=airportqueue.__main__:main"],
    },
    include_package_data=True,
    python_requires=">=3.10",
)
