"""
Setup configuration for Pacelane

This file allows the package to be installed in development mode:
    pip install -e .

Or for production installation:
    pip install .
"""

from setuptools import setup, find_packages

# Read the long description from README
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Read version from package
about = {}
with open("src/pacelane/__init__.py", "r", encoding="utf-8") as f:
    for line in f:
        if line.startswith("__version__"):
            exec(line, about)
            break

setup(
    name="pacelane",
    version=about.get("__version__", "1.0.0"),
    author="Pacelane Team",
    description="Onboarding wizard and AI content suggestions for LinkedIn creators",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Framework :: Flask",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
    install_requires=[
        "Flask>=2.3.3",
        "Flask-CORS>=4.0.0",
        "gunicorn>=21.2.0",
        "Werkzeug>=2.3.7",
        "MarkupSafe>=2.1.0",
        "cryptography>=41.0.4",
        "openai>=1.100.2",
        "psycopg2-binary>=2.9.9",
        "boto3>=1.34.0",
        "python-magic>=0.4.27",
        "celery>=5.3.4",
        "redis>=5.0.1",
        "requests>=2.31.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.24.0",
            "black>=23.7.0",
            "flake8>=6.1.0",
            "mypy>=1.5.0",
            "isort>=5.12.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pacelane=pacelane.app:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
