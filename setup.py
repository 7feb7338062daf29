from setuptools import find_namespace_packages, setup

setup(
    name='armforge',
    version='0.1.0',
    py_modules=['armforge'],
    packages=find_namespace_packages(include=['modules', 'modules.*']),
    install_requires=[
        'Click>=8.0',
        'PyYAML',
        'requests',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points='''
        [console_scripts]
        armforge=armforge:main
    ''',
)
