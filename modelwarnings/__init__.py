__project__      = 'modelwarnings'
__version__      = '0.1'
__keywords__     = ['validation', 'warnings', 'model', 'orm']
__author__       = 'Dave Jones'
__author_email__ = 'dave@waveform.org.uk'
__url__          = 'https://github.com/waveform80/modelwarnings'
__platforms__    = 'ALL'

__requires__ = ['humanize', 'python-dateutil']
__extra_requires__ = {
    'test': ['pytest', 'coverage'],
}

__classifiers__ = [
    'Development Status :: 3 - Alpha',
    'Intended Audience :: Developers',
    'License :: OSI Approved :: GNU General Public License v2 or later (GPLv2+)',
    'Operating System :: OS Independent',
    'Programming Language :: Python :: 3',
    'Topic :: Database',
]
