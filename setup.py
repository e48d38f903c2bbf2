# make sure every file can run on any computers, avoid absolute paths and undownloaded packages

#pip install setuptools first if not installed
from setuptools import setup, find_packages
import os


# Read requirements
def read_requirements():
    req_file = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    if os.path.exists(req_file):
        with open(req_file) as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    return [
        "pyyaml",
        "numpy",
        "matplotlib",
    ]

setup(
    name="mpu6050_tilt_fusion",
    version="0.1.0",
    description="Roll/pitch estimation from MPU6050 data: gyro vs complementary vs Kalman",
    packages=find_packages(include=[
        'tilt_estimation',
        'tilt_estimation.*',
        'fusion_pipeline',
        'fusion_pipeline.*',
        'hardware',
        'hardware.*',
        'simulation',
        'simulation.*',
        'debug',
        'debug.*',
    ]),
    py_modules=['run_tilt_monitor'],
    python_requires=">=3.8",
    install_requires=read_requirements(),
    extras_require={
        'hardware': ['smbus2'],
        'test': ['pytest'],
    },
    package_data={
        '': ['*.yaml', '*.yml'],
    },
    include_package_data=True,
)
