from setuptools import setup, find_packages

setup(
    name="envreader",
    version="0.1.0",
    description="Read environment variables into typed dataclass records",
    packages=find_packages(),
    install_requires=[
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.10",
)
