from setuptools import setup, find_packages  # ignore: type

setup(
    name="beyonder",
    version="1.0.0",
    description="Provisions Elasticsearch and OpenSearch indices, mappings, templates and ingest pipelines "
                "from JSON definition files",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=["requests", "boto3", "pyyaml", "Click", "cerberus"],
    extras_require={
        "test": ["pytest", "pytest-mock", "requests-mock", "moto[secretsmanager]"],
    },
    entry_points={
        "console_scripts": [
            "beyonder = beyonder.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Build Tools",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: Apache Software License",
    ],
)
