"""Nebula Meta information.
   Nebula keeps session tokens for several game accounts and switches between them.
"""
__title__ = 'nebula'
__description__ = (
   'Nebula keeps session tokens for several Riot accounts '
   'and switches the Riot Client between them.'
)
__version__ = '1.0.0'
__copyright__ = 'Copyright (c) 2024 Nebula Developers'
__author__ = 'Nebula Developers'
__author_email__ = 'dev@nebula.local'
__license__ = 'MIT'
__url__ = 'https://github.com/nebula-launcher/nebula'
