from setuptools import setup, find_packages
import re

# Read version from policycalc/__init__.py
with open('policycalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='policy-calc',
    version=version,
    packages=find_packages(include=['policycalc', 'policycalc.*']),
    package_data={
        'policycalc': ['reference_data/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'policy-calc=policycalc.cli.__main__:main',
            'policy-calc-mcp=policycalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Personal impact estimates for federal tax and healthcare policy scenarios.',
    python_requires='>=3.10',
)
