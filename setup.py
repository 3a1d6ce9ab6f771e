from setuptools import setup, find_packages

setup(
    name="timesheet-rules",
    version="0.1.0",
    description="Conditional row styling rules for timesheet entries",
    author="Timesheet Rules Developers",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        'timesheet_rules': ['local-config.yaml'],
    },
    include_package_data=True,
    install_requires=[
        'pyyaml>=6.0',
        'jsonschema>=4.17.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires='>=3.9',
)
