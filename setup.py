#!/usr/bin/env python

from setuptools import setup

setup(name='dirtsim',
      version='1.0',
      description='DIRT: Distributional Similarity of Predicate Templates '
                  'over Dependency Biarcs',
      license='GPL',
      packages=['dirtsim'],
      package_dir={'dirtsim': 'src/dirtsim'},
      python_requires='>=3.7',
      install_requires=['mrjob', 'nltk', 'numpy', 'scipy'],
      extras_require={'test': ['pytest']},
      )
