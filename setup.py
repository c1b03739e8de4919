from setuptools import setup, find_packages
import os


# extract version
with open(os.path.join(os.path.dirname(__file__),
          "pymdscan", "version.py")) as f:
    version = f.read().split('\n')[0].split('=')[-1].strip(' ').strip('"')


# read a file
def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()


# project metadata
setup(name='pymdscan',
      version=version,
      description="python Multi-Dimensional SCANs of likelihoods",
      long_description=read('README.md'),
      long_description_content_type="text/markdown",
      author="The pyMDScan developers",
      packages=find_packages(exclude=["doc*", "test*"]),
      install_requires=['numpy>=1.15.1',
                        'scipy>=1.5.0',
                        'pandas>=0.23.4',
                        'cloudpickle>=0.7.0',
                        'h5py>=3.1.0',
                        'tqdm>=4.46.0'],
      extras_require={'test': ['pytest>=5.4.3',
                               'pytest-cov>=2.10.0'],
                      'quality': ['flake8>=3.8.3',
                                  'flake8-bugbear>=20.1.4',
                                  'flake8-comprehensions>=3.2.3'],
                      },
      python_requires='>=3.9',
      )
