import io
import sys

from setuptools import find_packages, setup

with io.open('calysto_marie/_version.py', encoding="utf-8") as fid:
    for line in fid:
        if line.startswith('__version__'):
            __version__ = line.strip().split()[-1][1:-1]
            break

with open('README.md') as f:
    readme = f.read()

setup(name='calysto_marie',
      version=__version__,
      description='A MARIE Assembly Language kernel for Jupyter based on MetaKernel',
      long_description=readme,
      long_description_content_type='text/markdown',
      url="https://github.com/Calysto/calysto_marie",
      install_requires=["metakernel", "jupyter_client"],
      extras_require={"test": ["pytest"]},
      packages=find_packages(include=["calysto_marie", "calysto_marie.*"]),
      python_requires='>=3.6',
      classifiers = [
          'Framework :: IPython',
          'License :: OSI Approved :: BSD License',
          'Programming Language :: Python :: 3',
          'Programming Language :: Assembly',
          'Topic :: System :: Shells',
          'Topic :: Education',
      ]
)
