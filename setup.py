# setup.py
from setuptools import setup, find_packages

setup(
    name='pythra-forms',
    version='0.1.0',
    author='Ahmad Muhammad Bashir (RED X)',
    author_email='ambashir02@gmail.com',
    description='Form widgets (inputs, fields, popups and a date picker) for the Pythra widget model.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',

    # Finds `pythra_forms` and `pythra_forms_cli`
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,

    install_requires=[
        'PySide6',
        'typer[all]',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },

    # Creates an executable script named `pythra-forms` that calls the `app`
    # object inside `pythra_forms_cli.main`.
    entry_points={
        'console_scripts': [
            'pythra-forms = pythra_forms_cli.main:app',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: User Interfaces',
    ],
    python_requires='>=3.10',
)
