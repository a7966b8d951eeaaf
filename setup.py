from setuptools import setup

from kdbxcommander import __version__

install_requires = [
    'colorama',
    'prompt_toolkit',
    'pykeepass>=4.0.3',
    'pyotp>=2.9',
    'pyperclip',
    'tabulate',
]

if __name__ == '__main__':
    setup(
        name='kdbx-commander',
        version=__version__,
        description='Interactive shell for browsing KeePass databases',
        python_requires='>=3.7',
        packages=['kdbxcommander', 'kdbxcommander.commands'],
        install_requires=install_requires,
        extras_require={
            'test': ['pytest'],
        },
        entry_points={
            'console_scripts': [
                'kdbx-commander=kdbxcommander.__main__:main',
            ],
        },
    )
