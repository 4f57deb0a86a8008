
from setuptools import setup

setup(
    # Package Metadata
    name         = 'swfaction',
    description  = 'AVM1 action block codec and disassembler',
    version      = '0.6',
    author       = 'Jasper St. Pierre',
    author_email = 'jstpierre@mecheye.net',
    url          = 'https://github.com/magcius/fusion',
    license      = 'MPL 1.1',
    packages     = ['swfaction', 'swfaction.bitstream', 'swfaction.actions'],
    python_requires  = '>=3.6',
    install_requires = ['zope.interface', 'zope.component'],
    extras_require   = {'test': ['pytest']},
    entry_points     = {'console_scripts': ['sa-actiondump = swfaction.actiondump:main']},
)
