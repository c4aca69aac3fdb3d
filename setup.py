"""
Setup configuration for the meetup-booking Django application
"""

from setuptools import setup, find_packages
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the README file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='meetup-booking',
    version='1.0.0',
    description='Django application for meetup registration and seat booking over AJAX',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Meetup Booking Contributors',
    license='MIT',

    # Classification
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Web Environment',
        'Framework :: Django',
        'Framework :: Django :: 4.2',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Internet :: WWW/HTTP :: Dynamic Content',
    ],

    keywords='django meetup events booking registration seats',

    # Package configuration
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,

    # Dependencies
    install_requires=[
        'Django>=3.2',
        'requests>=2.25.0',
        'django-extensions>=3.0.0',
        'cryptography>=41.0.0',
    ],

    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-django>=4.5',
        ],
    },

    python_requires='>=3.9',
)
