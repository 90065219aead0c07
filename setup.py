from setuptools import setup

with open("README.md", 'r') as f:
    long_description = f.read()

setup(
    name='nfaregex',
    version='1.0.0',
    description='Regular expressions with complement, compiled into finite automata',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Paolo Bonzini',
    author_email='bonzini@gnu.org',
    packages=['nfaregex', 'nfaregex.automata', 'nfaregex.cli'],
    python_requires='>=3.9',
    install_requires=[
        'compynator'
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'nfaregex = nfaregex.cli.main:main',
        ]
    }
)
