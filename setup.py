"""
Provides project-level commands. Commands are run via `python setup.py <command> [args]`

Commands available:

- apidoc: regenerate reST docs for inline pydoc comments
"""

from setuptools import setup, Command

import os


class RunInRootCommand(Command):
    user_options = []

    def initialize_options(self):
        self.cwd = None

    def finalize_options(self):
        self.cwd = os.getcwd()

    def run(self):
        assert os.getcwd() == self.cwd, 'Must be in package root: %s' % self.cwd
        self.runcmd()

    def runcmd(self):
        pass


class ApiDocCommand(RunInRootCommand):
    description = "regenerates the API docs"

    def runcmd(self):
        os.system('"sphinx-apidoc" -f -e -o docs/apidoc src/btterminal')


setup(
    name='btterminal',
    version='0.0.1',
    description='An interactive terminal for sending text lines to Bluetooth serial port devices.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    package_dir={'': 'src'},
    packages=['btterminal', 'btterminal.bluetooth', 'btterminal.conduit', 'btterminal.config',
              'btterminal.connector', 'btterminal.support'],
    package_data={'btterminal': ['*.cfg'], 'btterminal.config': ['*.cfg']},
    install_requires=['pyserial>=3.5', 'configobj>=5.0.8'],
    extras_require={
        'test': ['pytest', 'PyHamcrest'],
    },
    entry_points={
        'console_scripts': ['btterminal = btterminal.terminal:main'],
    },
    zip_safe=False,
    cmdclass={
        'apidoc': ApiDocCommand,
    }
)
