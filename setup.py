from setuptools import setup, find_packages

# Read the README.md for the long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="syntax-styler",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["integration_tests", "integration_tests.*"]),
    package_dir={"": "."},
    package_data={"syntax_styler.tests": ["samples/*"]},
    install_requires=[
        "argparse>=1.4.0",
        "filelock>=3.18.0",
        "httpx>=0.28.1",
        "mcp[cli]>=1.5.0,<2",
        "pydantic>=2.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    author="0kenx",
    author_email="",
    entry_points={
        "console_scripts": [
            "syntax-styler=syntax_styler.cli:main",
            "syntax-styler-server=syntax_styler.server:main",
        ],
    },
    description="Regex-grammar syntax styler with CLI and MCP server",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/0kenx/mcp-servers",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
)
