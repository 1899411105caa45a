"""Navigator Secrets Meta information.
   Navigator Secrets stores user secrets encrypted at rest with AES-256-GCM.
"""
__title__ = 'navigator_secrets'
__description__ = (
   'Navigator Secrets stores short user secrets encrypted at rest '
   'with AES-256-GCM envelopes.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/navigator-secrets'
