from setuptools import setup, find_namespace_packages
import os

def get_requirements():
    thelibFolder = os.path.dirname(os.path.realpath(__file__))
    requirementPath = thelibFolder + '/requirements.txt'
    if os.path.isfile(requirementPath):
        with open(requirementPath) as f:
            return [line for line in f.read().splitlines() if line and not line.startswith('#')]
    return []

setup(
    name='propshape',
    version='1.0.0',
    description='Generate prop-types shape declarations from example JSON data',
    license='MIT',
    package_dir={'': 'src'},
    packages=find_namespace_packages(where='src', include=['propshape', 'propshape.*']),
    install_requires=get_requirements(),
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ],
    },
    python_requires='>=3.9',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
    ],
    entry_points={
        'console_scripts': [
            'propshape=propshape.cli:main',
        ]
    },
)
