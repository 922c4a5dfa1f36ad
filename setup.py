import setuptools

with open('README.md', 'rt') as f:
    long_description = f.read()

setuptools.setup(
    name='flintfp',
    version='0.0.0',
    description='rounded floating-point interval arithmetic: lower, upper, and tracked binary64 values',
    long_description=long_description,
    license='MIT',
    python_requires='>=3.11',
    install_requires=['numpy>=1.23.0', 'gmpy2>=2.1.2'],
    extras_require={
        'test' : ['pytest'],
    },
    packages=['flintfp', 'flintfp/core', 'flintfp/arithmetic'],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Operating System :: POSIX :: Linux',
        'License :: OSI Approved :: MIT License',
    ],
)
