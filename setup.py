from setuptools import setup, find_packages
with open("readme.md", "r") as fh:
    long_description = fh.read()

setup(
    name='phsettings',
    version='1.0.0',
    author='shashstormer',
    description='Placeholder settings resolution: which renderings a page editor may insert into a layout placeholder.',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["phsettings", "phsettings.*"]),
    python_requires=">=3.8",
    install_requires=[
        "beautifulsoup4>=4.11",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries',
        'Topic :: Internet :: WWW/HTTP :: Site Management',
    ],
)
