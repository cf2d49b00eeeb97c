"""
Setup configuration for Jewelry Invoice Renderer
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="jewelry-invoice-renderer",
    version="1.0.0",
    description="Jewelry order pricing and GST tax invoice rendering (PDF / HTML)",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "jewelry_invoice": ["templates/*.html", "templates/*.css"],
    },
    include_package_data=True,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Office/Business :: Financial :: Point-Of-Sale",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "xmltodict>=0.13.0",
        "python-dateutil>=2.8.2",
        "python-dotenv>=1.0.0",
        "reportlab>=4.0.0",
        "jinja2>=3.1.0",
        "markupsafe>=2.1.0",
        "xhtml2pdf>=0.2.11",
        "weasyprint>=60.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "jewelry-invoice=jewelry_invoice.main:main",
        ],
    },
)
