#!/usr/bin/env python3

from setuptools import setup

setup(
    name='quantext',
    version='1.0.0',
    description='Tokenized texts and sparse document-feature matrices for quantitative text analysis',
    author=", ".join(['Thorsten Vitt <thorsten.vitt@uni-wuerzburg.de>',
            'Fotis Jannidis <fotis.jannidis@uni-wuerzburg.de>']),

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python :: 3',
        'Topic :: Text Processing :: Linguistic',
    ],
    packages=['quantext'],
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.20',
        'pandas>=1.5',
        'profig>=0.5.1',
        'scipy>=1.8',
        'regex'
    ],
    extras_require={
        'test': ['pytest>=7'],
    },
)
