from setuptools import setup, find_packages

setup(
    name="conceptlab",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "conceptlab.core": ["default_config.json"],
        "conceptlab.schemas": ["*.json"],
    },
    install_requires=[
        "click>=8.0.0",
        "requests>=2.25.0",
        "jsonschema>=4.0.0",
        "python-dotenv>=0.19.0",
        "fastapi>=0.100.0",
        "uvicorn>=0.20.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "conceptlab=conceptlab.cli:main",
        ],
    },
    python_requires=">=3.8",
    description="AI-written marketing concepts for structured audience profiles",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
