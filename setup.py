from setuptools import setup
from setuptools import find_packages


setup(
    name='Mintaka',
    version='0.1',
    description='A cycle-accurate 5-stage pipelined MIPS core',
    license='BSD',
    python_requires='>=3.8',
    install_requires=["amaranth[builtin-yosys]>=0.5,<0.6", "pyyaml"],
    extras_require={
        "test": ["pytest"]
    },
    packages=find_packages(exclude=["tests"]),
)
