from setuptools import setup

# Read version from sockwatch/VERSION
with open('sockwatch/VERSION') as f:
    VERSION = f.read().strip()

setup(
    name='sockwatch',
    version=VERSION,
    description='Interactive curses-based socket and process viewer',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Networking :: Monitoring',
    ],
    python_requires='>=3.7',
    packages=['sockwatch'],
    package_data={'sockwatch': ['VERSION']},
    install_requires=[
        'psutil',
        'pyyaml',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'sockwatch=sockwatch:cli_entry',
        ],
    },
)
