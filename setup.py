import io

from setuptools import find_packages, setup

with io.open('calysto_vmal/_version.py', encoding="utf-8") as fid:
    for line in fid:
        if line.startswith('__version__'):
            __version__ = line.strip().split()[-1][1:-1]
            break

with io.open('README.md', encoding="utf-8") as f:
    readme = f.read()

setup(name='calysto_vmal',
      version=__version__,
      description='A VMAL assembler, virtual machine and Jupyter kernel based on MetaKernel',
      long_description=readme,
      long_description_content_type='text/markdown',
      install_requires=["metakernel", "IPython", "jupyter_client"],
      extras_require={'test': ["pytest"]},
      packages=find_packages(include=["calysto_vmal", "calysto_vmal.*"]),
      entry_points={
          'console_scripts': ['vmal = calysto_vmal.cli:main'],
      },
      python_requires='>=3.6',
      classifiers = [
          'Framework :: IPython',
          'License :: OSI Approved :: BSD License',
          'Programming Language :: Python :: 3',
          'Programming Language :: Assembly',
          'Topic :: System :: Emulators',
      ]
)
