from setuptools import setup


setup(
    name="data-alchemist",
    version="0.1.0",
    description="Local spreadsheet ingestion, validation and natural-language rule authoring for scheduling data",
    packages=["data_alchemist"],
    include_package_data=True,
    install_requires=[
        "pandas",
        "chardet",
        "streamlit",
    ],
)
