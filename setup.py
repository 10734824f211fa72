from setuptools import setup

setup(
    name='gitlanes',
    version='0.1',
    description='Lane layout engine for git commit graphs',
    author='Iliyas Jorio',
    classifiers=[
        'Topic :: Software Development :: Version Control :: Git',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
    ],
    packages=[
        'gitlanes',
        'gitlanes.graph',
        'gitlanes.toolbox',
    ],
    entry_points={
        'console_scripts': ['gitlanes=gitlanes.__main__:main']
    },
    python_requires='>= 3.10',
    install_requires=[
        'pygit2 >= 1.15',
    ],
    extras_require={
        'memory-indicator': ['psutil'],
        'test': ['pytest'],
    },
    tests_require=[
        'pytest',
    ],
)
